"""
API schemas for request/response validation.

Request bodies are deliberately loose (every field optional, nested objects
as plain dicts) so that a missing required field is reported as a 400 with
a specific message instead of a generic body-validation error. The routes
validate the nested objects into domain models themselves.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ChatRequest(CamelModel):
    """Request body for POST /ai-coach/chat."""

    message: Optional[str] = Field(
        None,
        description="The user's message",
        json_schema_extra={"examples": ["How many rest days should I take?"]},
    )
    context: Optional[Dict[str, Any]] = Field(
        None,
        description="Profile fields relevant to this turn; resent on every call",
    )


class ChatResponse(BaseModel):
    """Response from the chat endpoint."""

    response: str = Field(..., description="The coach's reply")


class GenerateWorkoutRequest(CamelModel):
    """Request body for POST /ai-coach/generate."""

    user_profile: Optional[Dict[str, Any]] = Field(None, description="The user's profile")
    week: Optional[int] = Field(None, ge=1, description="1-based program week")
    previous_feedback: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Feedback on previous weeks, most recent first",
    )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "ZHIPU_API_KEY is not configured. Please add it to your environment variables.",
                "code": "CONFIGURATION_ERROR",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health probe response."""

    status: str
    service: str
    model_configured: bool
