"""Dependency injection for API routes."""

from functools import lru_cache

from fastapi import Depends

from ..config import get_settings
from ..llm.providers import CompletionGateway, create_gateway
from ..services.coach import CoachService


@lru_cache
def get_gateway() -> CompletionGateway:
    """Get the process-wide model gateway."""
    return create_gateway(get_settings())


def get_coach_service(
    gateway: CompletionGateway = Depends(get_gateway),
) -> CoachService:
    """Get a coach service bound to the gateway."""
    return CoachService(gateway)
