"""Tests for CoachService."""

import json

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from fitness_coach.exceptions import TransportError, ValidationError
from fitness_coach.llm.providers import ResponseMode
from fitness_coach.models.profile import ChatContext, FeedbackEntry, UserProfile
from fitness_coach.models.workouts import Exercise, ProgressAnalysis, WorkoutPlan
from fitness_coach.services.coach import CoachService


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.complete = AsyncMock()
    return gateway


@pytest.fixture
def coach(mock_gateway):
    return CoachService(mock_gateway)


@pytest.fixture
def profile(minimal_profile_data):
    return UserProfile.model_validate(minimal_profile_data)


class TestGenerateWorkoutPlan:
    """Tests for workout generation."""

    @pytest.mark.asyncio
    async def test_returns_validated_plan(self, coach, mock_gateway, profile, workout_plan_data):
        mock_gateway.complete.return_value = json.dumps(workout_plan_data)

        plan = await coach.generate_workout_plan(profile, 1, [])

        assert isinstance(plan, WorkoutPlan)
        assert plan.total_duration == 30
        prompt, mode = mock_gateway.complete.call_args.args
        assert isinstance(prompt, str)
        assert "start at appropriate level" in prompt
        assert mode == ResponseMode.STRUCTURED

    @pytest.mark.asyncio
    async def test_feedback_reaches_prompt(self, coach, mock_gateway, profile, workout_plan_data):
        mock_gateway.complete.return_value = json.dumps(workout_plan_data)
        feedback = [FeedbackEntry(feedback="too easy", rating=4)]

        await coach.generate_workout_plan(profile, 3, feedback)

        prompt = mock_gateway.complete.call_args.args[0]
        assert "too easy" in prompt
        assert "increase intensity" in prompt

    @pytest.mark.asyncio
    async def test_non_json_reply_is_parse_failure(self, coach, mock_gateway, profile):
        mock_gateway.complete.return_value = "Here is a great workout: squats!"

        with pytest.raises(ValidationError) as exc_info:
            await coach.generate_workout_plan(profile)

        assert exc_info.value.message == "Failed to generate valid workout plan"
        assert exc_info.value.stage == "parse"

    @pytest.mark.asyncio
    async def test_out_of_bounds_plan_is_schema_failure(
        self, coach, mock_gateway, profile, workout_plan_data
    ):
        workout_plan_data["exercises"] = workout_plan_data["exercises"][:2]
        mock_gateway.complete.return_value = json.dumps(workout_plan_data)

        with pytest.raises(ValidationError) as exc_info:
            await coach.generate_workout_plan(profile)

        error = exc_info.value
        assert error.message == "Failed to generate valid workout plan"
        assert error.stage == "schema"
        assert any(v["field"] == "exercises" for v in error.violations)
        assert error.details["raw_response_preview"].startswith("{")

    @pytest.mark.asyncio
    async def test_gateway_errors_propagate(self, coach, mock_gateway, profile):
        mock_gateway.complete.side_effect = TransportError(503, "busy")

        with pytest.raises(TransportError):
            await coach.generate_workout_plan(profile)

    @pytest.mark.asyncio
    async def test_real_gateway_upstream_status(self, make_gateway, profile):
        def respond(request):
            return httpx.Response(502, text="bad gateway")

        gateway, _ = make_gateway(respond)
        coach = CoachService(gateway)

        with pytest.raises(TransportError) as exc_info:
            await coach.generate_workout_plan(profile)
        assert exc_info.value.upstream_status == 502


class TestOtherOperations:
    """Tests for analysis, chat, exercise suggestions and form tips."""

    @pytest.mark.asyncio
    async def test_analyze_progress(self, coach, mock_gateway, profile, progress_analysis_data):
        mock_gateway.complete.return_value = json.dumps(progress_analysis_data)

        analysis = await coach.analyze_progress(profile, [{"id": "w1"}], [])

        assert isinstance(analysis, ProgressAnalysis)
        assert "RECENT WORKOUT HISTORY (1 workouts)" in mock_gateway.complete.call_args.args[0]

    @pytest.mark.asyncio
    async def test_analyze_progress_failure_message(self, coach, mock_gateway, profile):
        mock_gateway.complete.return_value = "{}"

        with pytest.raises(ValidationError) as exc_info:
            await coach.analyze_progress(profile, [], [])
        assert exc_info.value.message == "Failed to analyze progress"

    @pytest.mark.asyncio
    async def test_chat_sends_messages_and_returns_text(self, coach, mock_gateway):
        mock_gateway.complete.return_value = "Take two rest days."
        context = ChatContext.model_validate({"fitnessLevel": "beginner"})

        reply = await coach.chat("How many rest days?", context)

        assert reply == "Take two rest days."
        messages, mode = mock_gateway.complete.call_args.args
        assert [m["role"] for m in messages] == ["system", "user"]
        assert '"fitnessLevel": "beginner"' in messages[0]["content"]
        assert mode == ResponseMode.FREEFORM

    @pytest.mark.asyncio
    async def test_chat_does_not_validate_reply(self, coach, mock_gateway):
        mock_gateway.complete.return_value = "{not json at all"
        assert await coach.chat("hi") == "{not json at all"

    @pytest.mark.asyncio
    async def test_suggest_exercises(self, coach, mock_gateway, exercise_factory):
        mock_gateway.complete.return_value = json.dumps(
            [exercise_factory(name=f"Move {i}") for i in range(5)]
        )

        exercises = await coach.suggest_exercises("legs", ["Kettlebell"], "beginner")

        assert len(exercises) == 5
        assert all(isinstance(e, Exercise) for e in exercises)
        assert "Equipment available: Kettlebell" in mock_gateway.complete.call_args.args[0]

    @pytest.mark.asyncio
    async def test_suggest_exercises_rejects_object(self, coach, mock_gateway, exercise_factory):
        mock_gateway.complete.return_value = json.dumps(exercise_factory())

        with pytest.raises(ValidationError) as exc_info:
            await coach.suggest_exercises("legs", [], "beginner")
        assert exc_info.value.message == "Failed to suggest exercises"

    @pytest.mark.asyncio
    async def test_form_tips_are_plain_text(self, coach, mock_gateway):
        mock_gateway.complete.return_value = "Keep your chest up."

        tips = await coach.provide_form_tips("Front Squat")

        assert tips == "Keep your chest up."
        prompt, mode = mock_gateway.complete.call_args.args
        assert "Front Squat" in prompt
        assert mode == ResponseMode.FREEFORM
