"""LLM prompt templates and builders for the Fitness Coach.

Builders are pure: the same inputs always render byte-identical text, and no
builder touches the network or any shared state.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from ..models.profile import ChatContext, FeedbackEntry, UserProfile


NOT_SPECIFIED = "not specified"
NONE = "none"
BODYWEIGHT = "bodyweight"

# Only the most recent history is embedded to keep prompts bounded
MAX_ANALYSIS_WORKOUTS = 5
MAX_ANALYSIS_RECORDS = 10

PROGRESSION_INCREASE = "increase intensity by 5-10% or vary exercises"
PROGRESSION_START = "start at appropriate level"

# ============================================================================
# WORKOUT GENERATION PROMPT
# ============================================================================

WORKOUT_GENERATION_PROMPT = """You are an expert fitness coach creating a personalized workout plan for Week {week}.

USER PROFILE:
- Name: {name}
- Age: {age}
- Weight: {weight}
- Height: {height}
- Fitness Level: {fitness_level}
- Goals: {goals}
- Location: {location}
- Available Equipment: {equipment}
- Injuries: {injuries}
- Dietary Preferences: {dietary_preferences}
- Available Days: {available_days}
- Workout Duration: {workout_duration}
- Work Schedule: {work_schedule}
- Sleep Hours: {sleep_hours}
- Stress Level: {stress_level}

PREVIOUS FEEDBACK:
{feedback_history}

INSTRUCTIONS:
1. Create a workout focused on: {primary_goal}
2. Consider fitness level: {fitness_level}
3. Account for lifestyle: {lifestyle}
4. Total duration under {duration_limit} minutes
5. Include 5-7 main exercises
6. Add warm-up (5-10 minutes) and cool-down (5-10 minutes)
7. Provide clear instructions for each exercise
8. Consider injuries: {injuries}
9. Progress from previous weeks: {progression}
10. Address feedback: {feedback_summary}

IMPORTANT SAFETY RULES:
- Always include disclaimers for users with injuries
- Suggest consulting healthcare professionals for pain or discomfort
- Provide alternatives for high-impact exercises if needed
- Ensure exercises match the available equipment
- Consider fatigue levels based on sleep and stress

RESPONSE AS JSON ONLY with this exact structure:
{{
  "name": "Week {week} - Focus Area",
  "focus": "primary goal of this workout",
  "exercises": [
    {{
      "name": "Exercise Name",
      "sets": 3,
      "reps": 12,
      "weight": 60,
      "duration": null,
      "restTime": 90,
      "difficulty": "intermediate",
      "equipment": "Dumbbells",
      "instructions": "Brief instructions",
      "muscleGroups": ["Chest", "Triceps"]
    }}
  ],
  "totalDuration": 45,
  "estimatedCalories": 300,
  "notes": "any special considerations",
  "warmup": [
    {{"name": "Jumping Jacks", "duration": 60}},
    {{"name": "Arm Circles", "duration": 30}}
  ],
  "cooldown": [
    {{"name": "Stretching", "duration": 60}}
  ]
}}

Rules for the JSON: 3-8 exercises, sets 1-5, reps 1-20, restTime 30-300 seconds,
difficulty one of beginner/intermediate/advanced, totalDuration 20-90 minutes."""

# ============================================================================
# PROGRESS ANALYSIS PROMPT
# ============================================================================

PROGRESS_ANALYSIS_PROMPT = """You are analyzing a user's fitness progress to provide insights and recommendations.

USER PROFILE:
{profile}

RECENT WORKOUT HISTORY ({workout_count} workouts):
{workouts}

PERSONAL RECORDS:
{records}

ANALYSIS TASKS:
1. Identify strengths (consistent performance, progress in key areas)
2. Identify weaknesses (plateaus, missing exercises, low performance areas)
3. Detect plateaus (stagnant PRs, lack of progress)
4. Provide specific recommendations for improvement
5. Suggest adjustments for next week
6. Include a motivational message

RESPONSE AS JSON ONLY with this exact structure:
{{
  "strengths": ["strength 1", "strength 2"],
  "weaknesses": ["weakness 1", "weakness 2"],
  "plateaus": ["plateau 1", "plateau 2"],
  "recommendations": ["recommendation 1", "recommendation 2"],
  "nextWeekAdjustments": "specific suggestions for week plan",
  "motivationalMessage": "encouraging message"
}}"""

# ============================================================================
# CHAT PROMPT
# ============================================================================

CHAT_NO_CONTEXT = (
    "No context yet. Ask about their goals, fitness level, and preferences "
    "before giving specific advice; do not guess missing details."
)

CHAT_SYSTEM_PROMPT = """You are an expert fitness coach and personal trainer. Your role is to:

EXPERTISE AREAS:
- Exercise programming and progression
- Nutrition planning and macro calculation
- Recovery and injury prevention
- Motivation and accountability
- Lifestyle and habit coaching

CURRENT USER CONTEXT:
{context}

GUIDELINES:
1. Always consider user's fitness level (beginner/intermediate/advanced)
2. Adapt workouts to available equipment and location
3. Account for medical conditions and physical limitations
4. Provide clear, actionable advice
5. Be encouraging and supportive
6. Ask clarifying questions if information is missing
7. Consider lifestyle factors (work, sleep, stress)
8. Provide realistic expectations
9. Suggest progression strategies
10. Include safety disclaimers when appropriate

SAFETY FIRST:
- Always recommend consulting healthcare professionals for pain or injuries
- Never prescribe specific calorie amounts without complete health data
- Flag any advice requiring medical supervision
- Provide low-intensity alternatives when needed

COMMUNICATION STYLE:
- Friendly and approachable
- Professional but casual
- Evidence-based but accessible
- Positive and motivating
- Clear and concise

Respond helpfully and ask follow-up questions to provide better advice."""

# ============================================================================
# EXERCISE LIBRARY PROMPTS
# ============================================================================

EXERCISE_SUGGESTION_PROMPT = """Suggest 5 exercises for {muscle_group} muscle group.

Equipment available: {equipment}
Difficulty level: {difficulty}

For each exercise, provide:
- Name
- Sets and reps
- Rest time
- Difficulty
- Equipment needed
- Brief instructions
- Muscle groups targeted

Respond as a JSON array with this structure:
[
  {{
    "name": "Exercise Name",
    "sets": 3,
    "reps": 12,
    "restTime": 90,
    "difficulty": "{difficulty}",
    "equipment": "Barbell",
    "instructions": "Brief instructions",
    "muscleGroups": ["Chest", "Triceps"]
  }}
]"""

FORM_TIPS_PROMPT = """Provide detailed form tips for {exercise_name}.

Include:
1. Starting position
2. Movement pattern
3. Common mistakes to avoid
4. Breathing technique
5. Safety considerations

Keep it concise and actionable. Format as plain text."""


# ============================================================================
# Builders
# ============================================================================

def _join(items: Optional[Sequence[str]], fallback: str) -> str:
    """Comma-join a list, or the fallback when it is unset or empty."""
    if not items:
        return fallback
    return ", ".join(str(item) for item in items)


def _or(value: Any, fallback: str = NOT_SPECIFIED, suffix: str = "") -> str:
    """Render a scalar (enum values unwrapped) or the fallback when unset."""
    if value is None or value == "":
        return fallback
    rendered = value.value if hasattr(value, "value") else value
    return f"{rendered}{suffix}"


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _format_feedback(week: int, feedback_history: Sequence[FeedbackEntry]) -> str:
    """One line per feedback entry, most recent first."""
    if not feedback_history:
        return "No previous feedback"
    lines = []
    for i, entry in enumerate(feedback_history):
        label_week = week - i
        label = f"Week {label_week}" if label_week >= 1 else "Earlier week"
        lines.append(f"- {label}: {entry.feedback} (Rating: {entry.rating}/5)")
    return "\n".join(lines)


def build_workout_prompt(
    profile: UserProfile,
    week_number: int = 1,
    feedback_history: Optional[Sequence[FeedbackEntry]] = None,
) -> str:
    """
    Render the workout-generation prompt for one week.

    Args:
        profile: The user's profile
        week_number: 1-based week of the program
        feedback_history: Feedback on prior weeks, most recent first

    Returns:
        Prompt text embedding the profile, progression and safety rules, and
        an example of the required JSON shape
    """
    feedback_history = list(feedback_history or [])
    injuries = _join(profile.injuries, NONE)

    return WORKOUT_GENERATION_PROMPT.format(
        week=week_number,
        name=_or(profile.name),
        age=_or(profile.age),
        weight=_or(profile.weight, suffix=" kg"),
        height=_or(profile.height, suffix=" cm"),
        fitness_level=profile.fitness_level.value,
        goals=_join(profile.goals, NOT_SPECIFIED),
        location=_or(profile.location),
        equipment=_join(profile.equipment, BODYWEIGHT),
        injuries=injuries,
        dietary_preferences=_or(profile.dietary_preferences),
        available_days=_join(profile.available_days, "all days"),
        workout_duration=_or(profile.workout_duration, suffix=" minutes per session"),
        work_schedule=_or(profile.work_schedule),
        sleep_hours=_or(profile.sleep_hours, suffix=" per night"),
        stress_level=_or(profile.stress_level),
        feedback_history=_format_feedback(week_number, feedback_history),
        primary_goal=profile.goals[0] if profile.goals else "general fitness",
        lifestyle=_or(profile.work_schedule, "flexible schedule"),
        duration_limit=profile.workout_duration or 60,
        progression=PROGRESSION_INCREASE if week_number > 1 else PROGRESSION_START,
        feedback_summary=_join([f.feedback for f in feedback_history], NONE),
    )


def build_analysis_prompt(
    profile: UserProfile,
    workout_history: Sequence[Dict[str, Any]],
    personal_records: Sequence[Dict[str, Any]],
) -> str:
    """Render the progress-analysis prompt from the latest history."""
    return PROGRESS_ANALYSIS_PROMPT.format(
        profile=_to_json(profile.to_prompt_dict()),
        workout_count=len(workout_history),
        workouts=_to_json(list(workout_history)[-MAX_ANALYSIS_WORKOUTS:]),
        records=_to_json(list(personal_records)[-MAX_ANALYSIS_RECORDS:]),
    )


def build_chat_system_prompt(context: Optional[ChatContext] = None) -> str:
    """Render the coach persona preamble for a chat turn."""
    if context is None or context.is_empty():
        rendered = CHAT_NO_CONTEXT
    else:
        rendered = _to_json(context.to_prompt_dict())
    return CHAT_SYSTEM_PROMPT.format(context=rendered)


def build_chat_messages(
    message: str,
    context: Optional[ChatContext] = None,
) -> List[Dict[str, str]]:
    """System preamble plus the user's message, as sent on the chat path."""
    return [
        {"role": "system", "content": build_chat_system_prompt(context)},
        {"role": "user", "content": message},
    ]


def build_exercise_suggestion_prompt(
    muscle_group: str,
    equipment: Optional[Sequence[str]],
    difficulty: str,
) -> str:
    """Render the exercise-suggestion prompt."""
    return EXERCISE_SUGGESTION_PROMPT.format(
        muscle_group=muscle_group,
        equipment=_join(equipment, BODYWEIGHT),
        difficulty=_or(difficulty, "beginner"),
    )


def build_form_tips_prompt(exercise_name: str) -> str:
    """Render the form-tips prompt."""
    return FORM_TIPS_PROMPT.format(exercise_name=exercise_name)
