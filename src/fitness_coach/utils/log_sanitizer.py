"""Log sanitization filter to keep credentials out of logs.

The gateway talks to the completion endpoint with a bearer credential, and
upstream error bodies are logged verbatim. This filter redacts, before any
record is written:
- Zhipu API keys (``<id>.<secret>``) and OpenAI-style ``sk-`` keys
- Bearer tokens and Authorization header values
- ``api_key=...`` / ``secret=...`` / ``token=...`` assignments

Usage:
    from fitness_coach.utils.log_sanitizer import install_log_sanitizer

    # Apply to all loggers at application startup
    install_log_sanitizer()
"""

import logging
import re
from typing import Any


class LogSanitizationFilter(logging.Filter):
    """Logging filter that redacts credentials from log messages."""

    # Order matters - more specific patterns come before general ones
    PATTERNS: list[tuple[re.Pattern, str]] = [
        # Zhipu API keys: 32 hex chars, a dot, then the secret part
        (re.compile(r'\b[a-fA-F0-9]{32}\.[A-Za-z0-9]{10,}\b'), '[REDACTED_ZHIPU_KEY]'),

        # OpenAI API keys (sk-...)
        (re.compile(r'\bsk-[a-zA-Z0-9_-]{20,}'), '[REDACTED_OPENAI_KEY]'),

        # JWT tokens (three base64-encoded segments separated by dots) - before Bearer
        (re.compile(r'\beyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+'), '[REDACTED_JWT]'),

        # Bearer tokens in Authorization headers
        (re.compile(r'Bearer\s+[a-zA-Z0-9_\-\.]+', re.IGNORECASE), 'Bearer [REDACTED_TOKEN]'),

        # Authorization header values (generic)
        (re.compile(r'(Authorization["\']?\s*[:=]\s*["\']?)(?!Bearer )[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),

        # Credential fields
        (re.compile(r'(api_key["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(apikey["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(secret["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the record in place; always lets it through."""
        if record.msg:
            record.msg = self._sanitize(str(record.msg))

        if record.args:
            record.args = self._sanitize_args(record.args)

        return True

    def _sanitize(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def _sanitize_args(self, args: Any) -> Any:
        """Recursively sanitize log arguments."""
        if isinstance(args, str):
            return self._sanitize(args)
        elif isinstance(args, tuple):
            return tuple(self._sanitize_args(arg) for arg in args)
        elif isinstance(args, list):
            return [self._sanitize_args(arg) for arg in args]
        elif isinstance(args, dict):
            return {k: self._sanitize_args(v) for k, v in args.items()}
        else:
            str_val = str(args)
            sanitized = self._sanitize(str_val)
            # Keep the original object unless something was redacted
            return sanitized if sanitized != str_val else args


def install_log_sanitizer(logger_name: str | None = None) -> LogSanitizationFilter:
    """Install the sanitization filter.

    Args:
        logger_name: If provided, install only on the named logger.
            If None, install on the root logger and its handlers.

    Returns:
        The installed filter
    """
    sanitizer = LogSanitizationFilter()

    if logger_name:
        logging.getLogger(logger_name).addFilter(sanitizer)
        return sanitizer

    root_logger = logging.getLogger()
    root_logger.addFilter(sanitizer)
    # Records from child loggers skip root's filters, so handlers need it too
    for handler in root_logger.handlers:
        handler.addFilter(sanitizer)
    return sanitizer


def sanitize_string(text: str) -> str:
    """Sanitize a string without going through logging."""
    return LogSanitizationFilter()._sanitize(text)


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging with the sanitizer attached to its handler."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    install_log_sanitizer()
