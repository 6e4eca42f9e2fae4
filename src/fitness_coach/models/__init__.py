"""Data models for the Fitness Coach backend."""

from .profile import (
    ChatContext,
    FeedbackEntry,
    FitnessLevel,
    Location,
    StressLevel,
    UserProfile,
)
from .workouts import (
    Difficulty,
    Exercise,
    ProgressAnalysis,
    TimedActivity,
    WorkoutPlan,
)

__all__ = [
    "ChatContext",
    "FeedbackEntry",
    "FitnessLevel",
    "Location",
    "StressLevel",
    "UserProfile",
    "Difficulty",
    "Exercise",
    "ProgressAnalysis",
    "TimedActivity",
    "WorkoutPlan",
]
