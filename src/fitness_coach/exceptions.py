"""
Custom exceptions for the Fitness Coach backend.

Every error raised by the coach pipeline derives from FitnessCoachError and
carries:
- A human-readable message
- An error code for API responses
- The HTTP status code the API boundary reports
- Optional details for diagnostics
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Model gateway errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    LLM_TRANSPORT_ERROR = "LLM_TRANSPORT_ERROR"
    LLM_RESPONSE_INVALID = "LLM_RESPONSE_INVALID"


class FitnessCoachError(Exception):
    """
    Base exception for all Fitness Coach errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error body."""
        return {"error": self.message, "code": self.code.value}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Request Errors (400)
# ============================================================================

class MissingFieldError(FitnessCoachError):
    """Raised when a required request field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(
            message=f"Missing {field}",
            code=ErrorCode.MISSING_FIELD,
            status_code=400,
            details={"field": field},
        )


class InvalidRequestError(FitnessCoachError):
    """Raised when a request field is present but malformed."""

    def __init__(
        self,
        field: str,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(
            message=f"Invalid {field}",
            code=ErrorCode.INVALID_REQUEST,
            status_code=400,
            details={"field": field, "errors": errors or []},
        )


# ============================================================================
# Model Gateway Errors (500)
# ============================================================================

class ConfigurationError(FitnessCoachError):
    """Raised when a required setting for the model gateway is missing."""

    def __init__(self, setting: str) -> None:
        super().__init__(
            message=(
                f"{setting} is not configured. "
                "Please add it to your environment variables."
            ),
            code=ErrorCode.CONFIGURATION_ERROR,
            details={"configuration_missing": setting},
        )
        self.setting = setting


class TransportError(FitnessCoachError):
    """Raised when the completion endpoint is unreachable or answers non-2xx."""

    def __init__(
        self,
        status_code: Optional[int] = None,
        body: str = "",
        message: Optional[str] = None,
    ) -> None:
        if message is None:
            if status_code is None:
                message = f"Model API unreachable: {body}"
            else:
                message = f"Model API error ({status_code}): {body}"
        super().__init__(
            message=message,
            code=ErrorCode.LLM_TRANSPORT_ERROR,
            details={"status_code": status_code, "body": body},
        )
        # status_code on the base class is the HTTP status we report
        self.upstream_status = status_code
        self.body = body


class ValidationError(FitnessCoachError):
    """
    Raised when model output fails parsing or schema validation.

    ``stage`` is "parse" when the raw text is not JSON and "schema" when the
    decoded value breaks a declared constraint. ``violations`` lists every
    violated constraint as ``{"field", "message"}`` entries.
    """

    def __init__(
        self,
        message: str = "Failed to parse model response",
        stage: str = "schema",
        violations: Optional[List[Dict[str, str]]] = None,
        raw_response: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {"stage": stage, "violations": violations or []}
        if raw_response:
            details["raw_response_preview"] = raw_response[:500]
        super().__init__(
            message=message,
            code=ErrorCode.LLM_RESPONSE_INVALID,
            details=details,
        )
        self.stage = stage
        self.violations = violations or []
