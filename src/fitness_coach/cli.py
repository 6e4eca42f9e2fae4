#!/usr/bin/env python3
"""
Fitness Coach CLI.

Run the API server or call the coach directly from JSON files.

Usage:
    fitness-coach serve --port 8000
    fitness-coach generate profile.json --week 2 --feedback feedback.json
    fitness-coach analyze profile.json history.json --records records.json
    fitness-coach exercises chest --equipment Dumbbells Bench --difficulty beginner
    fitness-coach form-tips "Barbell Squat"
    fitness-coach chat "How many rest days do I need?" --context profile.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import get_settings
from .exceptions import ConfigurationError, FitnessCoachError
from .llm.providers import create_gateway
from .models.profile import ChatContext, FeedbackEntry, UserProfile
from .services.coach import CoachService
from .utils.log_sanitizer import configure_logging


console = Console()
err_console = Console(stderr=True)


def load_json(path: str) -> Any:
    """Read a JSON file given on the command line."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False))


def print_error(error: FitnessCoachError) -> None:
    """Print a coach error; configuration errors get setup guidance."""
    err_console.print(f"[red]Error ({error.code.value}): {escape(error.message)}[/red]")
    if isinstance(error, ConfigurationError):
        err_console.print(
            f"[yellow]Set {error.setting} in your environment or in a .env "
            f"file at the project root, then retry.[/yellow]"
        )


def build_service() -> CoachService:
    return CoachService(create_gateway(get_settings()))


async def cmd_generate(args, coach: CoachService) -> None:
    """Generate a workout plan."""
    profile = UserProfile.model_validate(load_json(args.profile))
    feedback = []
    if args.feedback:
        feedback = [FeedbackEntry.model_validate(f) for f in load_json(args.feedback)]

    plan = await coach.generate_workout_plan(profile, args.week, feedback)

    err_console.print(Panel(f"[bold]{escape(plan.name)}[/bold] ({escape(plan.focus)})"))
    print_json(plan.to_response())


async def cmd_analyze(args, coach: CoachService) -> None:
    """Analyze workout history."""
    profile = UserProfile.model_validate(load_json(args.profile))
    history = load_json(args.history)
    records = load_json(args.records) if args.records else []

    analysis = await coach.analyze_progress(profile, history, records)
    print_json(analysis.to_response())


async def cmd_exercises(args, coach: CoachService) -> None:
    """Suggest exercises for a muscle group."""
    exercises = await coach.suggest_exercises(
        args.muscle_group, args.equipment or [], args.difficulty
    )
    print_json([exercise.to_response() for exercise in exercises])


async def cmd_form_tips(args, coach: CoachService) -> None:
    """Print form tips for an exercise."""
    print(await coach.provide_form_tips(args.exercise))


async def cmd_chat(args, coach: CoachService) -> None:
    """Send one chat message."""
    context: Optional[ChatContext] = None
    if args.context:
        context = ChatContext.model_validate(load_json(args.context))
    reply = await coach.chat(args.message, context)
    console.print(f"[cyan]Coach:[/cyan] {escape(reply)}")


def cmd_serve(args) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fitness_coach.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


COMMANDS = {
    "generate": cmd_generate,
    "analyze": cmd_analyze,
    "exercises": cmd_exercises,
    "form-tips": cmd_form_tips,
    "chat": cmd_chat,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fitness-coach",
        description="Fitness Coach - AI workout generation and coaching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fitness-coach serve --port 8000
  fitness-coach generate profile.json --week 2
  fitness-coach exercises legs --equipment Kettlebell --difficulty intermediate
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_p = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", help="Bind address (default from settings)")
    serve_p.add_argument("--port", type=int, help="Port (default from settings)")
    serve_p.add_argument("--reload", action="store_true", help="Auto-reload on code changes")

    generate_p = subparsers.add_parser("generate", help="Generate a workout plan")
    generate_p.add_argument("profile", help="Path to a user profile JSON file")
    generate_p.add_argument("--week", "-w", type=int, default=1, help="Program week (1-based)")
    generate_p.add_argument("--feedback", help="Path to a JSON list of feedback entries")

    analyze_p = subparsers.add_parser("analyze", help="Analyze training progress")
    analyze_p.add_argument("profile", help="Path to a user profile JSON file")
    analyze_p.add_argument("history", help="Path to a JSON list of workouts")
    analyze_p.add_argument("--records", help="Path to a JSON list of personal records")

    exercises_p = subparsers.add_parser("exercises", help="Suggest exercises")
    exercises_p.add_argument("muscle_group", help="Target muscle group")
    exercises_p.add_argument("--equipment", nargs="*", help="Available equipment")
    exercises_p.add_argument(
        "--difficulty",
        choices=["beginner", "intermediate", "advanced"],
        default="beginner",
        help="Difficulty level",
    )

    tips_p = subparsers.add_parser("form-tips", help="Get form tips for an exercise")
    tips_p.add_argument("exercise", help="Exercise name")

    chat_p = subparsers.add_parser("chat", help="Ask the coach a question")
    chat_p.add_argument("message", help="Your message")
    chat_p.add_argument("--context", help="Path to a profile JSON file to send as context")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    configure_logging(get_settings().log_level)

    try:
        asyncio.run(handler(args, build_service()))
    except FitnessCoachError as e:
        print_error(e)
        return 1
    except PydanticValidationError as e:
        err_console.print(f"[red]Invalid input file:[/red]\n{escape(str(e))}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        err_console.print(f"[red]Could not read input: {escape(str(e))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
