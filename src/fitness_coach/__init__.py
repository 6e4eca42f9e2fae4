"""Fitness Coach: LLM-backed workout generation and coaching chat."""

__version__ = "0.1.0"
