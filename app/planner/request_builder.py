"""Turn a user profile into the (instructions, user message) pair sent to the model.

Pure: no I/O, no settings lookups. The caller passes the deficit target.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from app.planner.errors import InvalidProfile
from app.planner.models import Goal, MealSlot, UserProfile
from app.planner.weekdays import day_codes

DEFAULT_DEFICIT_KCAL = 500.0
NOT_SPECIFIED = "Not specified"

PLAN_INSTRUCTIONS = textwrap.dedent(
    f"""
    You are a certified fitness & nutrition coach.
    Return a 7-day plan as JSON. The root object must have exactly two keys: "workouts" and "meals".
    "workouts" is an array of objects, each with: "day" (one of {", ".join(day_codes())}), "title" (e.g. "HIIT + Core"), "burn_kcal_est" (estimated calories burned, number), and "exercises" (a non-empty array of objects, each with "name", "sets" (integer), "reps" (string or number, e.g. "12" or "AMRAP")).
    "meals" is an array of objects, each with: "day", "meal" (one of {", ".join(s.value for s in MealSlot)}), "item" (e.g. "Greek-yoghurt bowl"), "kcal" (number), and "macros" (an object with "p" for protein grams, "c" for carbs grams, "f" for fat grams, all numbers).
    Ensure the JSON is well-formed and can be directly parsed.
    """
).strip()


@dataclass(frozen=True, slots=True)
class PlanRequest:
    instructions: str
    user_message: str


def _num(value: float) -> str:
    # 180.0 -> "180", 72.5 -> "72.5"
    return f"{value:g}"


def profile_from_payload(payload: Any) -> UserProfile:
    """Build a UserProfile from a request body, reporting bad input as InvalidProfile."""
    if isinstance(payload, UserProfile):
        return payload
    if not isinstance(payload, dict):
        raise InvalidProfile(details="Profile must be a JSON object.")
    try:
        return UserProfile.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise InvalidProfile(fields, details=f"Invalid value for: {', '.join(fields)}") from exc


def build_request(profile: UserProfile, *, deficit_kcal: float = DEFAULT_DEFICIT_KCAL) -> PlanRequest:
    missing = profile.missing_fields()
    if missing:
        raise InvalidProfile(missing)

    equipment = ", ".join(profile.equipment) if profile.equipment else NOT_SPECIFIED

    lines = [
        "Generate a 7-day workout and meal plan based on the following user details:",
        f"- Height: {_num(profile.height_cm)} cm",
        f"- Weight: {_num(profile.weight_kg)} kg",
        f"- Primary Goal: {profile.goal.value}",
        f"- Available Equipment: {equipment}",
    ]
    if profile.activity_level:
        lines.append(f"- Activity Level: {profile.activity_level}")
    if profile.dietary_preferences:
        lines.append(f"- Dietary Preferences: {', '.join(profile.dietary_preferences)}")
    if profile.health_conditions:
        lines.append(f"- Health Conditions: {', '.join(profile.health_conditions)}")

    lines.append("")
    if profile.goal is Goal.fat_loss:
        lines.append(f"Aim for a daily caloric deficit of approximately {_num(deficit_kcal)} kcal for fat loss.")
    lines.append("Focus on variety and balanced nutrition. Provide estimated calories for meals and workouts.")

    return PlanRequest(instructions=PLAN_INSTRUCTIONS, user_message="\n".join(lines))
