"""Output models for payloads the language model must return.

Every numeric bound here is a hard constraint: a model response that breaks
one is rejected as a whole. Scalars use pydantic's strict types so that
``"12"`` is not quietly accepted where a number is required.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
)
from pydantic.alias_generators import to_camel


# A reply's 30 stays 30 in the response, 30.5 stays 30.5
StrictNumber = Union[StrictInt, StrictFloat]


class Difficulty(str, Enum):
    """Difficulty of a single exercise."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ResponseModel(BaseModel):
    """Base for model-produced payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )

    def to_response(self) -> dict:
        """Serialize for the front end, omitting unset optional values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Exercise(ResponseModel):
    """One exercise prescription."""

    name: StrictStr
    sets: StrictInt = Field(..., ge=1, le=5)
    reps: StrictInt = Field(..., ge=1, le=20)
    weight: Optional[StrictNumber] = None
    duration: Optional[StrictNumber] = None
    rest_time: StrictInt = Field(..., ge=30, le=300, description="Rest in seconds")
    difficulty: Difficulty
    equipment: StrictStr
    instructions: StrictStr
    muscle_groups: List[StrictStr]


class TimedActivity(ResponseModel):
    """A warm-up or cool-down item."""

    name: StrictStr
    duration: StrictNumber = Field(..., description="Duration in seconds")


class WorkoutPlan(ResponseModel):
    """A single generated workout session."""

    name: StrictStr
    focus: StrictStr
    exercises: List[Exercise] = Field(..., min_length=3, max_length=8)
    total_duration: StrictNumber = Field(..., ge=20, le=90, description="Minutes")
    estimated_calories: StrictNumber
    notes: StrictStr
    warmup: List[TimedActivity]
    cooldown: List[TimedActivity]


class ProgressAnalysis(ResponseModel):
    """Coach's read on recent training history."""

    strengths: List[StrictStr]
    weaknesses: List[StrictStr]
    plateaus: List[StrictStr]
    recommendations: List[StrictStr]
    next_week_adjustments: StrictStr
    motivational_message: StrictStr
