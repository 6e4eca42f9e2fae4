"""
Model gateway for the external completion endpoint.

This module owns the single outbound call to an OpenAI-compatible
chat-completions API (Zhipu GLM by default) and classifies its outcome:
- ConfigurationError when the credential or model name is missing
- TransportError when the endpoint is unreachable or answers non-2xx
- otherwise the raw text of the first completion choice

The gateway never parses or validates what comes back; that belongs to the
schema registry, so transport failures and shape failures stay distinct.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union
import asyncio
import logging
import time

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from ..config import Settings, ZHIPU_BASE_URL, get_settings
from ..exceptions import ConfigurationError, TransportError


logger = logging.getLogger(__name__)

Message = Dict[str, str]
PromptOrMessages = Union[str, Sequence[Message]]


class ResponseMode(str, Enum):
    """How the caller will treat the completion text."""

    STRUCTURED = "structured"  # JSON, validated by the schema registry
    FREEFORM = "freeform"      # display text, no schema


@dataclass(frozen=True)
class CallParams:
    """Sampling parameters for one call shape."""

    temperature: float
    max_tokens: int


# Single user-role prompt (workout, analysis, exercises, form tips)
PROMPT_PARAMS = CallParams(temperature=0.7, max_tokens=4000)
# System preamble + user message (chat)
CHAT_PARAMS = CallParams(temperature=0.8, max_tokens=2000)


@dataclass(frozen=True)
class GatewayConfig:
    """Explicit, read-only configuration for a ModelGateway."""

    api_key: str
    model: str
    base_url: str = ZHIPU_BASE_URL
    json_mode: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            api_key=settings.zhipu_api_key,
            model=settings.zhipu_model,
            base_url=settings.llm_base_url,
            json_mode=settings.llm_json_mode,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)


class CompletionGateway(Protocol):
    """Anything that can turn a prompt into raw completion text."""

    async def complete(
        self,
        prompt_or_messages: PromptOrMessages,
        response_mode: ResponseMode = ResponseMode.FREEFORM,
    ) -> str:
        ...


class GatewayMetrics:
    """Track gateway usage for the lifetime of one instance."""

    def __init__(self) -> None:
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self._request_times: list[float] = []

    def record_request(self, success: bool, duration_ms: Optional[float] = None) -> None:
        """Record a request."""
        self.total_requests += 1
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1
        if duration_ms is not None:
            self._request_times.append(duration_ms)
            # Keep only last 100 request times
            if len(self._request_times) > 100:
                self._request_times = self._request_times[-100:]

    @property
    def avg_request_time_ms(self) -> float:
        """Average request time in milliseconds."""
        if not self._request_times:
            return 0.0
        return sum(self._request_times) / len(self._request_times)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "avg_request_time_ms": round(self.avg_request_time_ms, 2),
        }


class ModelGateway:
    """
    Single-shot client for the completion endpoint.

    One call is one round trip: no retries, no backoff and no application
    timeout. Wrap it in RetryingGateway for bounded retries.
    """

    def __init__(
        self,
        config: GatewayConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            config: Credential, model name and endpoint
            http_client: Optional httpx client (tests pass one with a mock
                transport)
        """
        self.config = config
        self._http_client = http_client
        self._client: Optional[AsyncOpenAI] = None
        self.metrics = GatewayMetrics()

    def _ensure_configured(self) -> None:
        if not self.config.api_key:
            raise ConfigurationError("ZHIPU_API_KEY")
        if not self.config.model:
            raise ConfigurationError("ZHIPU_MODEL")

    def _get_client(self) -> AsyncOpenAI:
        # Built lazily: the SDK refuses to construct without a key
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    @staticmethod
    def _prepare(prompt_or_messages: PromptOrMessages) -> tuple[List[Message], CallParams]:
        """Map the two call shapes onto messages and sampling parameters."""
        if isinstance(prompt_or_messages, str):
            return [{"role": "user", "content": prompt_or_messages}], PROMPT_PARAMS

        messages = [dict(message) for message in prompt_or_messages]
        if not messages:
            raise ValueError("messages must not be empty")
        return messages, CHAT_PARAMS

    async def complete(
        self,
        prompt_or_messages: PromptOrMessages,
        response_mode: ResponseMode = ResponseMode.FREEFORM,
    ) -> str:
        """
        Send one completion request.

        Args:
            prompt_or_messages: A single prompt (sent as one user message) or
                a system + user message sequence
            response_mode: Whether the caller will validate the text as JSON

        Returns:
            Raw text of the first completion choice

        Raises:
            ConfigurationError: Credential or model missing (no request sent)
            TransportError: Endpoint unreachable or non-2xx status
        """
        self._ensure_configured()
        messages, params = self._prepare(prompt_or_messages)

        request: Dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
        }
        if response_mode == ResponseMode.STRUCTURED and self.config.json_mode:
            request["response_format"] = {"type": "json_object"}

        logger.debug(
            f"Completion request: mode={ResponseMode(response_mode).value}, "
            f"model={self.config.model}, messages={len(messages)}"
        )

        start_time = time.time()
        try:
            response = await self._get_client().chat.completions.create(**request)
        except APIStatusError as e:
            self.metrics.record_request(success=False)
            body = e.response.text
            logger.error(f"Model API error: {e.status_code} {body[:200]}")
            raise TransportError(status_code=e.status_code, body=body) from e
        except APIConnectionError as e:
            self.metrics.record_request(success=False)
            logger.error(f"Model API unreachable: {e}")
            raise TransportError(status_code=None, body=str(e)) from e

        duration_ms = (time.time() - start_time) * 1000
        if not response.choices:
            self.metrics.record_request(success=False, duration_ms=duration_ms)
            raise TransportError(
                status_code=200,
                message="Model API returned no completion choices",
            )

        self.metrics.record_request(success=True, duration_ms=duration_ms)
        return response.choices[0].message.content or ""

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics."""
        return self.metrics.to_dict()

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        retryable_status_codes: Optional[set[int]] = None,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retryable_status_codes = retryable_status_codes or {429, 500, 502, 503, 504}

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)

    def is_retryable(self, error: TransportError) -> bool:
        """Unreachable endpoints and listed statuses are worth another try."""
        return (
            error.upstream_status is None
            or error.upstream_status in self.retryable_status_codes
        )


class RetryingGateway:
    """
    Decorator adding bounded retry with exponential backoff to a gateway.

    Only retryable TransportErrors are retried; ConfigurationError and
    non-retryable statuses surface on the first attempt.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self.gateway = gateway
        self.retry_config = retry_config or RetryConfig()

    async def complete(
        self,
        prompt_or_messages: PromptOrMessages,
        response_mode: ResponseMode = ResponseMode.FREEFORM,
    ) -> str:
        attempt = 0
        while True:
            try:
                return await self.gateway.complete(prompt_or_messages, response_mode)
            except TransportError as e:
                if attempt >= self.retry_config.max_retries or not self.retry_config.is_retryable(e):
                    raise
                delay = self.retry_config.get_delay(attempt)
                attempt += 1
                logger.warning(
                    f"Completion failed (status {e.upstream_status}). "
                    f"Retry {attempt}/{self.retry_config.max_retries} in {delay:.1f}s"
                )
                await asyncio.sleep(delay)


def create_gateway(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> CompletionGateway:
    """
    Build the gateway described by the application settings.

    Returns a plain ModelGateway, wrapped in RetryingGateway when
    ``llm_max_retries`` is positive.
    """
    settings = settings or get_settings()
    gateway = ModelGateway(GatewayConfig.from_settings(settings), http_client=http_client)
    if settings.llm_max_retries > 0:
        return RetryingGateway(
            gateway,
            RetryConfig(
                max_retries=settings.llm_max_retries,
                base_delay=settings.llm_retry_base_delay,
            ),
        )
    return gateway
