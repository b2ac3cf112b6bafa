"""Parse and validate generated plan text. Nothing else trusts model output.

Two levels of failure:
- document level (not JSON, root not an object, workouts/meals not arrays)
  raises MalformedOutput immediately;
- entry level (bad day, non-numeric sets/kcal, missing strings, ...) drops
  the entry and records a warning. If that leaves nothing at all, the
  result is MalformedOutput too.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.planner.errors import MalformedOutput
from app.planner.models import MealEntry, RawPlan, WorkoutEntry

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class ParsedPlan:
    plan: RawPlan
    dropped: int = 0
    warnings: list[str] = field(default_factory=list)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "entry"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def _check_entry(model: type[EntryT], item: Any) -> tuple[EntryT | None, str | None]:
    """Validate one entry. Returns (entry, None) or (None, reason)."""
    if not isinstance(item, dict):
        return None, f"expected an object, got {type(item).__name__}"
    try:
        return model.model_validate(item), None
    except ValidationError as exc:
        return None, _describe(exc)


def _entries(doc: dict[str, Any], key: str, raw_text: str) -> list[Any]:
    value = doc.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedOutput(f'"{key}" must be an array, got {type(value).__name__}.', raw_text)
    return value


def _filter(model: type[EntryT], key: str, items: list[Any], warnings: list[str]) -> list[EntryT]:
    kept: list[EntryT] = []
    for idx, item in enumerate(items):
        entry, reason = _check_entry(model, item)
        if entry is None:
            warning = f"{key}[{idx}] dropped: {reason}"
            logger.warning("Generated plan %s", warning)
            warnings.append(warning)
            continue
        kept.append(entry)
    return kept


def parse_plan(raw_text: str) -> ParsedPlan:
    try:
        doc = json.loads(raw_text)
    except (TypeError, ValueError) as exc:
        logger.error("Failed to parse generated plan as JSON: %s", exc)
        raise MalformedOutput("The response was not valid JSON.", raw_text) from exc

    if not isinstance(doc, dict):
        raise MalformedOutput(f"Expected a JSON object at the root, got {type(doc).__name__}.", raw_text)

    raw_workouts = _entries(doc, "workouts", raw_text)
    raw_meals = _entries(doc, "meals", raw_text)

    warnings: list[str] = []
    workouts = _filter(WorkoutEntry, "workouts", raw_workouts, warnings)
    meals = _filter(MealEntry, "meals", raw_meals, warnings)

    dropped = len(warnings)
    if dropped and not workouts and not meals:
        raise MalformedOutput(f"All {dropped} plan entries were invalid.", raw_text)

    plan = RawPlan(workouts=tuple(workouts), meals=tuple(meals))
    logger.info(
        "Parsed plan: %d workouts, %d meals, %d dropped", len(plan.workouts), len(plan.meals), dropped
    )
    return ParsedPlan(plan=plan, dropped=dropped, warnings=warnings)


def parse_and_validate(raw_text: str) -> RawPlan:
    return parse_plan(raw_text).plan
