"""Coach service: prompt -> gateway -> schema registry.

This is the only place where raw model text is turned into typed results.
Structured calls always go through ``parse_and_validate``; validation
failures are logged in full and re-raised with a generic, user-facing message.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import ValidationError
from ..llm.prompts import (
    build_analysis_prompt,
    build_chat_messages,
    build_exercise_suggestion_prompt,
    build_form_tips_prompt,
    build_workout_prompt,
)
from ..llm.providers import CompletionGateway, ResponseMode
from ..llm.schemas import SchemaKind, parse_and_validate
from ..models.profile import ChatContext, FeedbackEntry, UserProfile
from ..models.workouts import Exercise, ProgressAnalysis, WorkoutPlan


logger = logging.getLogger(__name__)


class CoachService:
    """The five coach operations, each one stateless round trip."""

    def __init__(self, gateway: CompletionGateway) -> None:
        self.gateway = gateway

    async def _structured(
        self,
        prompt: str,
        kind: SchemaKind,
        failure_message: str,
    ) -> Any:
        raw = await self.gateway.complete(prompt, ResponseMode.STRUCTURED)
        try:
            return parse_and_validate(kind, raw)
        except ValidationError as e:
            logger.error(
                f"{failure_message}: {e.message} "
                f"(stage={e.stage}, violations={e.violations})"
            )
            raise ValidationError(
                message=failure_message,
                stage=e.stage,
                violations=e.violations,
                raw_response=raw,
            ) from e

    async def generate_workout_plan(
        self,
        profile: UserProfile,
        week: int = 1,
        previous_feedback: Optional[Sequence[FeedbackEntry]] = None,
    ) -> WorkoutPlan:
        """Generate one validated workout for the given week."""
        prompt = build_workout_prompt(profile, week, previous_feedback or [])
        plan = await self._structured(
            prompt, SchemaKind.WORKOUT_PLAN, "Failed to generate valid workout plan"
        )
        logger.info(
            f"Generated workout '{plan.name}' for week {week} "
            f"({len(plan.exercises)} exercises)"
        )
        return plan

    async def analyze_progress(
        self,
        profile: UserProfile,
        workout_history: Sequence[Dict[str, Any]],
        personal_records: Sequence[Dict[str, Any]],
    ) -> ProgressAnalysis:
        """Analyze recent workouts and personal records."""
        prompt = build_analysis_prompt(profile, workout_history, personal_records)
        return await self._structured(
            prompt, SchemaKind.PROGRESS_ANALYSIS, "Failed to analyze progress"
        )

    async def chat(self, message: str, context: Optional[ChatContext] = None) -> str:
        """Produce a free-text coaching reply to one message."""
        messages = build_chat_messages(message, context)
        return await self.gateway.complete(messages, ResponseMode.FREEFORM)

    async def suggest_exercises(
        self,
        muscle_group: str,
        equipment: Sequence[str],
        difficulty: str,
    ) -> List[Exercise]:
        """Suggest exercises for a muscle group."""
        prompt = build_exercise_suggestion_prompt(muscle_group, equipment, difficulty)
        return await self._structured(
            prompt, SchemaKind.EXERCISE_LIST, "Failed to suggest exercises"
        )

    async def provide_form_tips(self, exercise_name: str) -> str:
        """Plain-text form tips for one exercise."""
        prompt = build_form_tips_prompt(exercise_name)
        return await self.gateway.complete(prompt, ResponseMode.FREEFORM)
