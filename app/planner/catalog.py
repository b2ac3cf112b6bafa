"""Hardcoded goal and equipment options — configuration only."""

from __future__ import annotations

from dataclasses import dataclass

from app.planner.models import Goal


@dataclass(frozen=True, slots=True)
class GoalOption:
    value: Goal
    label: str
    description: str


@dataclass(frozen=True, slots=True)
class EquipmentOption:
    value: str
    label: str


GOALS: dict[Goal, GoalOption] = {
    Goal.fat_loss: GoalOption(
        value=Goal.fat_loss,
        label="Lose Fat",
        description="Calorie deficit with conditioning-heavy training.",
    ),
    Goal.build_muscle: GoalOption(
        value=Goal.build_muscle,
        label="Build Muscle",
        description="Progressive strength work with a protein-forward diet.",
    ),
    Goal.maintain_weight: GoalOption(
        value=Goal.maintain_weight,
        label="Maintain Weight",
        description="Balanced training and maintenance calories.",
    ),
}

# Equipment is free-form when sent to the model; these are the suggested values.
EQUIPMENT: dict[str, EquipmentOption] = {
    "dumbbells": EquipmentOption(value="dumbbells", label="Dumbbells"),
    "resistance_bands": EquipmentOption(value="resistance_bands", label="Resistance Bands"),
    "kettlebells": EquipmentOption(value="kettlebells", label="Kettlebells"),
    "bodyweight": EquipmentOption(value="bodyweight", label="Bodyweight Only"),
    "full_gym": EquipmentOption(value="full_gym", label="Full Gym Access"),
}


def list_goals() -> list[GoalOption]:
    return list(GOALS.values())


def get_goal(goal: Goal | str) -> GoalOption | None:
    try:
        return GOALS.get(Goal(goal))
    except ValueError:
        return None


def list_equipment() -> list[EquipmentOption]:
    return list(EQUIPMENT.values())

