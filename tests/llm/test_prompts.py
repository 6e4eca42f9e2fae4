"""Tests for the prompt builders."""

import json

import pytest

from fitness_coach.llm.prompts import (
    CHAT_NO_CONTEXT,
    build_analysis_prompt,
    build_chat_messages,
    build_chat_system_prompt,
    build_exercise_suggestion_prompt,
    build_form_tips_prompt,
    build_workout_prompt,
)
from fitness_coach.models.profile import ChatContext, FeedbackEntry, UserProfile


@pytest.fixture
def profile(profile_data) -> UserProfile:
    return UserProfile.model_validate(profile_data)


@pytest.fixture
def minimal_profile(minimal_profile_data) -> UserProfile:
    return UserProfile.model_validate(minimal_profile_data)


# ============================================================================
# Workout prompt
# ============================================================================

class TestBuildWorkoutPrompt:
    """Tests for build_workout_prompt."""

    def test_is_deterministic(self, profile):
        feedback = [FeedbackEntry(feedback="too easy", rating=4)]
        first = build_workout_prompt(profile, 2, feedback)
        second = build_workout_prompt(UserProfile.model_validate(profile.model_dump()), 2, feedback)
        assert first == second

    def test_contains_every_profile_value(self, profile, profile_data):
        prompt = build_workout_prompt(profile, 1, [])

        for key, value in profile_data.items():
            values = value if isinstance(value, list) else [value]
            for item in values:
                assert str(item) in prompt, f"{key}={item!r} missing from prompt"

    def test_unset_optional_fields_use_fallbacks(self, minimal_profile):
        prompt = build_workout_prompt(minimal_profile, 1, [])

        assert "- Name: not specified" in prompt
        assert "- Available Equipment: bodyweight" in prompt
        assert "- Injuries: none" in prompt
        assert "- Work Schedule: not specified" in prompt
        assert "- Sleep Hours: not specified" in prompt
        assert "- Stress Level: not specified" in prompt
        assert "- Dietary Preferences: not specified" in prompt
        assert "- Available Days: all days" in prompt
        assert "None" not in prompt
        assert "undefined" not in prompt

    def test_week_one_starts_at_appropriate_level(self, minimal_profile):
        prompt = build_workout_prompt(minimal_profile, 1, [])

        assert "start at appropriate level" in prompt
        assert "increase intensity" not in prompt
        assert "No previous feedback" in prompt

    def test_later_week_increases_intensity_and_quotes_feedback(self, minimal_profile):
        feedback = [FeedbackEntry(feedback="too easy", rating=4)]
        prompt = build_workout_prompt(minimal_profile, 3, feedback)

        assert "increase intensity" in prompt
        assert "start at appropriate level" not in prompt
        assert "too easy" in prompt
        assert "- Week 3: too easy (Rating: 4/5)" in prompt
        assert "Address feedback: too easy" in prompt

    def test_safety_rules_are_unconditional(self, minimal_profile, profile):
        for p in (minimal_profile, profile):
            prompt = build_workout_prompt(p, 1, [])
            assert "Always include disclaimers for users with injuries" in prompt
            assert "consulting healthcare professionals" in prompt

    def test_embeds_output_shape(self, minimal_profile):
        prompt = build_workout_prompt(minimal_profile, 1, [])

        for key in ("restTime", "muscleGroups", "totalDuration", "estimatedCalories",
                    "warmup", "cooldown", '"difficulty": "intermediate"'):
            assert key in prompt

    def test_instructions_use_profile(self, profile):
        prompt = build_workout_prompt(profile, 1, [])

        assert "Create a workout focused on: muscle-gain" in prompt
        assert "Total duration under 45 minutes" in prompt
        assert "Account for lifestyle: 9-5 office job" in prompt

    def test_instruction_fallbacks(self):
        profile = UserProfile(fitness_level="advanced")
        prompt = build_workout_prompt(profile, 1)

        assert "Create a workout focused on: general fitness" in prompt
        assert "Total duration under 60 minutes" in prompt
        assert "Account for lifestyle: flexible schedule" in prompt

    def test_feedback_older_than_program_start(self, minimal_profile):
        feedback = [
            FeedbackEntry(feedback="hard", rating=2),
            FeedbackEntry(feedback="ok", rating=3),
        ]
        prompt = build_workout_prompt(minimal_profile, 1, feedback)

        assert "- Week 1: hard (Rating: 2/5)" in prompt
        assert "- Earlier week: ok (Rating: 3/5)" in prompt


# ============================================================================
# Analysis prompt
# ============================================================================

class TestBuildAnalysisPrompt:
    """Tests for build_analysis_prompt."""

    def test_truncates_history(self, profile):
        workouts = [{"id": f"w{i}", "duration": 30 + i} for i in range(12)]
        records = [{"exercise": "Squat", "value": 50 + i} for i in range(15)]

        prompt = build_analysis_prompt(profile, workouts, records)

        assert "RECENT WORKOUT HISTORY (12 workouts)" in prompt
        assert '"w6"' not in prompt
        for i in range(7, 12):
            assert f'"w{i}"' in prompt
        assert '"value": 54' not in prompt
        for i in range(5, 15):
            assert f'"value": {50 + i}' in prompt

    def test_embeds_profile_json(self, profile):
        prompt = build_analysis_prompt(profile, [], [])

        assert '"fitnessLevel": "intermediate"' in prompt
        assert '"name": "Alex Rivera"' in prompt
        assert '"nextWeekAdjustments"' in prompt

    def test_is_deterministic(self, profile):
        workouts = [{"id": "w1"}]
        assert build_analysis_prompt(profile, workouts, []) == build_analysis_prompt(profile, workouts, [])


# ============================================================================
# Chat prompt
# ============================================================================

class TestChatPrompt:
    """Tests for the chat preamble and message sequence."""

    def test_without_context_asks_for_information(self):
        prompt = build_chat_system_prompt(None)
        assert CHAT_NO_CONTEXT in prompt
        assert "Ask about their goals, fitness level, and preferences" in prompt

    def test_empty_context_counts_as_absent(self):
        assert CHAT_NO_CONTEXT in build_chat_system_prompt(ChatContext())

    def test_with_context_embeds_json(self):
        context = ChatContext.model_validate({"fitnessLevel": "beginner", "goals": ["endurance"]})
        prompt = build_chat_system_prompt(context)

        assert CHAT_NO_CONTEXT not in prompt
        assert json.dumps({"fitnessLevel": "beginner", "goals": ["endurance"]}, indent=2) in prompt

    def test_messages_are_system_then_user(self):
        messages = build_chat_messages("How often should I train?", None)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[1]["content"] == "How often should I train?"
        assert "expert fitness coach" in messages[0]["content"]


# ============================================================================
# Exercise library prompts
# ============================================================================

class TestExercisePrompts:
    """Tests for exercise suggestion and form-tip prompts."""

    def test_suggestion_lists_equipment(self):
        prompt = build_exercise_suggestion_prompt("chest", ["Dumbbells", "Bench"], "intermediate")

        assert "Suggest 5 exercises for chest muscle group." in prompt
        assert "Equipment available: Dumbbells, Bench" in prompt
        assert "Difficulty level: intermediate" in prompt
        assert '"difficulty": "intermediate"' in prompt

    def test_suggestion_without_equipment_is_bodyweight(self):
        prompt = build_exercise_suggestion_prompt("legs", [], "beginner")
        assert "Equipment available: bodyweight" in prompt

    def test_form_tips(self):
        prompt = build_form_tips_prompt("Barbell Squat")

        assert prompt.startswith("Provide detailed form tips for Barbell Squat.")
        assert "Breathing technique" in prompt
        assert "plain text" in prompt
