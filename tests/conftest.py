"""Pytest configuration and fixtures."""

import copy
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from fitness_coach.llm.providers import GatewayConfig, ModelGateway


@pytest.fixture
def profile_data() -> Dict[str, Any]:
    """A complete profile as the onboarding wizard sends it."""
    return {
        "name": "Alex Rivera",
        "age": 34,
        "weight": 72.5,
        "height": 178,
        "fitnessLevel": "intermediate",
        "goals": ["muscle-gain", "strength"],
        "location": "gym",
        "equipment": ["Barbell", "Dumbbells", "Bench"],
        "injuries": ["left knee tendinitis"],
        "dietaryPreferences": "vegetarian",
        "workSchedule": "9-5 office job",
        "availableDays": ["Monday", "Wednesday", "Friday"],
        "workoutDuration": 45,
        "sleepHours": 7,
        "stressLevel": "moderate",
    }


@pytest.fixture
def minimal_profile_data() -> Dict[str, Any]:
    """The smallest profile the generate route accepts."""
    return {
        "fitnessLevel": "beginner",
        "goals": ["weight-loss"],
        "equipment": [],
        "workoutDuration": 30,
    }


def make_exercise(**overrides: Any) -> Dict[str, Any]:
    exercise = {
        "name": "Goblet Squat",
        "sets": 3,
        "reps": 12,
        "weight": 16,
        "duration": None,
        "restTime": 90,
        "difficulty": "beginner",
        "equipment": "Kettlebell",
        "instructions": "Hold the bell at chest height and sit back between your heels.",
        "muscleGroups": ["Quadriceps", "Glutes"],
    }
    exercise.update(overrides)
    return exercise


@pytest.fixture
def exercise_factory() -> Callable[..., Dict[str, Any]]:
    return make_exercise


@pytest.fixture
def workout_plan_data() -> Dict[str, Any]:
    """A valid workout plan with exactly three exercises."""
    return {
        "name": "Week 1 - Full Body Foundations",
        "focus": "weight-loss",
        "exercises": [
            make_exercise(),
            make_exercise(name="Push-up", weight=None, equipment="Bodyweight",
                          muscleGroups=["Chest", "Triceps"]),
            make_exercise(name="Dumbbell Row", reps=10, restTime=60,
                          muscleGroups=["Back", "Biceps"]),
        ],
        "totalDuration": 30,
        "estimatedCalories": 220,
        "notes": "Keep the knee pain-free; stop if anything hurts.",
        "warmup": [
            {"name": "Jumping Jacks", "duration": 60},
            {"name": "Arm Circles", "duration": 30},
        ],
        "cooldown": [{"name": "Stretching", "duration": 60}],
    }


@pytest.fixture
def progress_analysis_data() -> Dict[str, Any]:
    return {
        "strengths": ["Consistent three sessions per week"],
        "weaknesses": ["Little posterior-chain work"],
        "plateaus": ["Bench press stuck at 60 kg"],
        "recommendations": ["Add Romanian deadlifts"],
        "nextWeekAdjustments": "Swap one push day for a hinge-focused session.",
        "motivationalMessage": "Three weeks in a row - keep the streak going!",
    }


def completion_body(content: Any) -> Dict[str, Any]:
    """An OpenAI-compatible chat completion response."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "glm-3-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
    }


class RecordingTransport:
    """httpx handler that records requests and replays a canned response."""

    def __init__(self, response: Callable[[httpx.Request], httpx.Response]) -> None:
        self._response = response
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response(request)

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_gateway():
    """Build a real ModelGateway whose HTTP traffic goes to a mock transport."""

    def _make(
        response: Callable[[httpx.Request], httpx.Response],
        api_key: str = "test-key",
        model: str = "glm-3-turbo",
        json_mode: bool = False,
    ):
        transport = RecordingTransport(response)
        gateway = ModelGateway(
            GatewayConfig(api_key=api_key, model=model, json_mode=json_mode),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
        )
        return gateway, transport

    return _make


@pytest.fixture
def reply_with():
    """Response factory returning ``content`` as the first completion choice."""

    def _reply(content: Any, status_code: int = 200):
        def _respond(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=completion_body(copy.deepcopy(content)))
        return _respond

    return _reply
