"""API route modules."""

from . import coach

__all__ = ["coach"]
