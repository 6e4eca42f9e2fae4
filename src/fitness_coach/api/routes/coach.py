"""AI coach routes: chat replies and workout generation."""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..deps import get_coach_service
from ..schemas import ChatRequest, ChatResponse, ErrorResponse, GenerateWorkoutRequest
from ...exceptions import InvalidRequestError, MissingFieldError
from ...models.profile import ChatContext, FeedbackEntry, UserProfile
from ...services.coach import CoachService


router = APIRouter()
logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or malformed request field"},
    500: {"model": ErrorResponse, "description": "Configuration, upstream or model-response failure"},
}


def _validate_field(model: Type[M], field: str, value: Any) -> M:
    """Validate one request field into a domain model, or fail with 400."""
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(x) for x in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise InvalidRequestError(field, errors) from e


@router.post("/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
async def chat(
    request: ChatRequest,
    coach: CoachService = Depends(get_coach_service),
) -> ChatResponse:
    """
    Send one message to the AI coach.

    The coach keeps no conversation history: send the relevant profile
    fields as ``context`` with every message.
    """
    if not request.message or not request.message.strip():
        raise MissingFieldError("message")

    context: Optional[ChatContext] = None
    if request.context is not None:
        context = _validate_field(ChatContext, "context", request.context)

    logger.info(f"[chat] Processing message: {request.message[:50]}...")
    reply = await coach.chat(request.message, context)
    return ChatResponse(response=reply)


@router.post("/generate", responses=ERROR_RESPONSES)
async def generate_workout(
    request: GenerateWorkoutRequest,
    coach: CoachService = Depends(get_coach_service),
) -> Dict[str, Any]:
    """
    Generate a validated workout plan for one week.

    Returns the WorkoutPlan object itself (camelCase keys), as the workout
    page renders it directly.
    """
    if request.user_profile is None:
        raise MissingFieldError("userProfile")

    profile = _validate_field(UserProfile, "userProfile", request.user_profile)
    feedback: List[FeedbackEntry] = [
        _validate_field(FeedbackEntry, "previousFeedback", entry)
        for entry in request.previous_feedback or []
    ]
    week = request.week or 1

    logger.info(
        f"[generate] week={week}, level={profile.fitness_level.value}, "
        f"feedback_entries={len(feedback)}"
    )
    plan = await coach.generate_workout_plan(profile, week, feedback)
    return plan.to_response()
