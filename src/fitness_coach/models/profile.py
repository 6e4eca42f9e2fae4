"""Input models describing the user the coach is talking to."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel


Number = Union[int, float]

LIST_FIELDS = ("goals", "equipment", "injuries", "available_days")


class FitnessLevel(str, Enum):
    """Self-assessed training experience."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class StressLevel(str, Enum):
    """Self-reported non-training life stress."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Location(str, Enum):
    """Where the user trains."""
    HOME = "home"
    GYM = "gym"
    OUTDOOR = "outdoor"


def coerce_string_list(value: Any) -> Any:
    """
    Accept list fields the way the client store persists them.

    The onboarding wizard stores lists as JSON strings (``'["Dumbbells"]'``),
    so a string is decoded as JSON first and split on commas otherwise.
    """
    if not isinstance(value, str):
        return value
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return [part.strip() for part in value.split(",") if part.strip()]
    if decoded is None:
        return None
    return decoded if isinstance(decoded, list) else [decoded]


class CoachModel(BaseModel):
    """Base model speaking the front end's camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_prompt_dict(self) -> Dict[str, Any]:
        """Dump the set fields with camelCase keys, ready for json.dumps."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class UserProfile(CoachModel):
    """Profile collected by the onboarding wizard."""

    name: Optional[str] = None
    age: Optional[PositiveInt] = None
    weight: Optional[Number] = Field(None, description="Body weight in kg")
    height: Optional[Number] = Field(None, description="Height in cm")
    fitness_level: FitnessLevel
    goals: Optional[List[str]] = None
    location: Optional[Location] = None
    equipment: Optional[List[str]] = None
    injuries: Optional[List[str]] = None
    dietary_preferences: Optional[str] = None
    work_schedule: Optional[str] = None
    available_days: Optional[List[str]] = None
    workout_duration: Optional[PositiveInt] = Field(
        None, description="Target session length in minutes"
    )
    sleep_hours: Optional[Number] = None
    stress_level: Optional[StressLevel] = None

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return coerce_string_list(value)


class FeedbackEntry(CoachModel):
    """Feedback the user left on a previous week's workout."""

    feedback: str
    rating: int = Field(..., ge=1, le=5)


class ChatContext(CoachModel):
    """
    Profile subset sent along with each chat message.

    Every field is optional: the chat UI sends whatever the user has filled in
    so far, and nothing is remembered between turns.
    """

    name: Optional[str] = None
    age: Optional[PositiveInt] = None
    weight: Optional[Number] = None
    height: Optional[Number] = None
    fitness_level: Optional[FitnessLevel] = None
    goals: Optional[List[str]] = None
    location: Optional[Location] = None
    equipment: Optional[List[str]] = None
    injuries: Optional[List[str]] = None
    dietary_preferences: Optional[str] = None
    work_schedule: Optional[str] = None
    available_days: Optional[List[str]] = None
    workout_duration: Optional[PositiveInt] = None
    sleep_hours: Optional[Number] = None
    stress_level: Optional[StressLevel] = None

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return coerce_string_list(value)

    def is_empty(self) -> bool:
        """True when the caller sent no usable profile information."""
        return not self.to_prompt_dict()
