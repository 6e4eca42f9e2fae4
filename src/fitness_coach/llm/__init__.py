"""LLM integration for the Fitness Coach."""

from .providers import (
    CompletionGateway,
    GatewayConfig,
    ModelGateway,
    ResponseMode,
    RetryConfig,
    RetryingGateway,
    create_gateway,
)
from .schemas import SchemaKind, parse, parse_and_validate, validate

__all__ = [
    "CompletionGateway",
    "GatewayConfig",
    "ModelGateway",
    "ResponseMode",
    "RetryConfig",
    "RetryingGateway",
    "create_gateway",
    "SchemaKind",
    "parse",
    "parse_and_validate",
    "validate",
]
