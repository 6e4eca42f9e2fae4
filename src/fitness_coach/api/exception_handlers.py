"""
Exception handlers for the FastAPI application.

Every failure leaves the API as ``{"error": "<message>", "code": "<CODE>"}``.
Missing or malformed request fields map to 400; configuration, transport and
model-response failures map to 500.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import (
    ErrorCode,
    FitnessCoachError,
    TransportError,
    ValidationError,
)


logger = logging.getLogger(__name__)


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: Dict[str, Any] = {"error": message, "code": code}
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def fitness_coach_error_handler(
    request: Request,
    exc: FitnessCoachError,
) -> JSONResponse:
    """Handle all FitnessCoachError exceptions."""
    if isinstance(exc, ValidationError):
        # Violations were logged by the service; the client gets the generic text
        logger.warning(f"[{request.url.path}] {exc.message} (stage={exc.stage})")
    elif isinstance(exc, TransportError):
        logger.warning(f"[{request.url.path}] upstream failure: {exc.upstream_status}")
    else:
        logger.warning(f"[{request.url.path}] {exc.code.value}: {exc.message}")

    extra = None
    if exc.code == ErrorCode.INVALID_REQUEST:
        extra = {"details": exc.details.get("errors", [])}

    return create_error_response(
        status_code=exc.status_code,
        code=exc.code.value,
        message=exc.message,
        extra=extra,
    )


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422s."""
    errors = []
    for error in exc.errors():
        loc = ".".join(str(x) for x in error["loc"])
        errors.append({"field": loc, "message": error["msg"]})

    return create_error_response(
        status_code=400,
        code=ErrorCode.INVALID_REQUEST.value,
        message="Invalid request body",
        extra={"details": errors},
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")

    return create_error_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR.value,
        message="An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(FitnessCoachError, fitness_coach_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Note: This should be last as it catches all Exception types
    app.add_exception_handler(Exception, generic_exception_handler)
