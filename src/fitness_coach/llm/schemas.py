"""
Schema registry for structured model responses.

Model output goes through two stages before anything downstream touches it:

1. ``parse`` decodes the raw completion text into a JSON value.
2. ``validate`` checks that value against the declared shape for its kind.

Each stage raises ``ValidationError`` with its own ``stage`` so callers can
tell "not JSON at all" from "JSON with the wrong shape". Nothing partial is
ever returned.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, List

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models.workouts import Exercise, ProgressAnalysis, WorkoutPlan


class SchemaKind(str, Enum):
    """Kinds of structured payload the model can be asked for."""
    WORKOUT_PLAN = "workout_plan"
    EXERCISE_LIST = "exercise_list"
    PROGRESS_ANALYSIS = "progress_analysis"


_ADAPTERS: Dict[SchemaKind, TypeAdapter] = {
    SchemaKind.WORKOUT_PLAN: TypeAdapter(WorkoutPlan),
    SchemaKind.EXERCISE_LIST: TypeAdapter(List[Exercise]),
    SchemaKind.PROGRESS_ANALYSIS: TypeAdapter(ProgressAnalysis),
}

# A single ```json ... ``` fence wrapped around the whole payload
_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def _format_violations(exc: PydanticValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into field/message pairs."""
    violations = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error["loc"]) or "<root>"
        violations.append({"field": loc, "message": error["msg"]})
    return violations


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse(raw_text: str) -> Any:
    """
    Decode raw completion text into a JSON value.

    Args:
        raw_text: Text of the first completion choice

    Returns:
        The decoded JSON value

    Raises:
        ValidationError: With ``stage="parse"`` if the text is not strict JSON
            (``NaN`` and ``Infinity`` included)
    """
    text = (raw_text or "").strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationError(
            message=f"Model response is not valid JSON: {e}",
            stage="parse",
            violations=[{"field": "<root>", "message": str(e)}],
            raw_response=raw_text,
        ) from e


def validate(kind: SchemaKind, candidate: Any) -> Any:
    """
    Validate a decoded JSON value against the schema for ``kind``.

    Args:
        kind: Which payload shape is expected
        candidate: Value produced by ``parse``

    Returns:
        A WorkoutPlan, list of Exercise, or ProgressAnalysis satisfying every
        declared constraint

    Raises:
        ValidationError: With ``stage="schema"`` listing all violations
    """
    adapter = _ADAPTERS[SchemaKind(kind)]
    try:
        return adapter.validate_python(candidate)
    except PydanticValidationError as e:
        violations = _format_violations(e)
        raise ValidationError(
            message=(
                f"Model response does not match the {SchemaKind(kind).value} schema "
                f"({len(violations)} violation(s))"
            ),
            stage="schema",
            violations=violations,
        ) from e


def parse_and_validate(kind: SchemaKind, raw_text: str) -> Any:
    """Run both stages on raw completion text."""
    candidate = parse(raw_text)
    try:
        return validate(kind, candidate)
    except ValidationError as e:
        e.details["raw_response_preview"] = (raw_text or "")[:500]
        raise
