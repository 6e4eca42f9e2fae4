"""Service layer for the Fitness Coach."""

from .coach import CoachService

__all__ = ["CoachService"]
