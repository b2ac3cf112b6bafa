"""Plan data contract — Pydantic v2 models.

Attribute names are snake_case; the keys the generative model emits
(``burn_kcal_est``, ``meal``, ``p``/``c``/``f``) are kept as aliases and are
what the API serializes (FastAPI dumps by alias).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from app.planner.weekdays import Weekday

# Numbers coming back from the model are never coerced from strings or bools.
NonNegative = Annotated[StrictFloat, Field(ge=0, allow_inf_nan=False)]
NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class Goal(str, Enum):
    fat_loss = "fat_loss"
    build_muscle = "build_muscle"
    maintain_weight = "maintain_weight"


class MealSlot(str, Enum):
    Breakfast = "Breakfast"
    Lunch = "Lunch"
    Dinner = "Dinner"
    Snack = "Snack"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class UserProfile(_Frozen):
    """One form submission.

    height/weight/goal may be absent here; ``build_request`` is what rejects
    an incomplete profile, so the error surfaces as InvalidProfile rather
    than a schema error.
    """

    height_cm: float | None = Field(
        default=None, gt=0, validation_alias=AliasChoices("height_cm", "heightCm", "height")
    )
    weight_kg: float | None = Field(
        default=None, gt=0, validation_alias=AliasChoices("weight_kg", "weightKg", "weight")
    )
    goal: Goal | None = None
    equipment: tuple[str, ...] = ()

    activity_level: str | None = Field(default=None, validation_alias=AliasChoices("activity_level", "activityLevel"))
    dietary_preferences: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("dietary_preferences", "dietaryPreferences")
    )
    health_conditions: tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("health_conditions", "healthConditions")
    )

    @field_validator("height_cm", "weight_kg", "goal", "activity_level", mode="before")
    @classmethod
    def _blank_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("height_cm", "weight_kg", mode="before")
    @classmethod
    def _reject_bool(cls, v: Any) -> Any:
        # bool is an int subclass; lax float would read true as 1.0
        if isinstance(v, bool):
            raise ValueError("must be a number")
        return v

    @field_validator("equipment", "dietary_preferences", "health_conditions", mode="before")
    @classmethod
    def _clean_list(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())
        return v

    def missing_fields(self) -> list[str]:
        missing = []
        if self.height_cm is None:
            missing.append("height")
        if self.weight_kg is None:
            missing.append("weight")
        if self.goal is None:
            missing.append("goal")
        return missing


# ---------------------------------------------------------------------------
# Plan entries
# ---------------------------------------------------------------------------


class Exercise(_Frozen):
    name: NonEmptyStr
    sets: Annotated[StrictInt, Field(gt=0)]
    reps: StrictInt | StrictFloat | StrictStr  # "10", 12, "AMRAP", "8-12"


class WorkoutEntry(_Frozen):
    day: Weekday
    title: StrictStr
    estimated_burn_kcal: NonNegative | None = Field(default=None, alias="burn_kcal_est")
    exercises: tuple[Exercise, ...] = Field(min_length=1)


class Macros(_Frozen):
    protein_g: NonNegative = Field(alias="p")
    carbs_g: NonNegative = Field(alias="c")
    fat_g: NonNegative = Field(alias="f")

    @classmethod
    def zero(cls) -> Macros:
        return cls(protein_g=0.0, carbs_g=0.0, fat_g=0.0)

    def __add__(self, other: Macros) -> Macros:
        return Macros(
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )


class MealEntry(_Frozen):
    day: Weekday
    meal_slot: MealSlot = Field(alias="meal")
    item: NonEmptyStr
    kcal: NonNegative
    macros: Macros


class RawPlan(_Frozen):
    """Validated, not yet day-aggregated plan."""

    workouts: tuple[WorkoutEntry, ...] = ()
    meals: tuple[MealEntry, ...] = ()

    @property
    def entry_count(self) -> int:
        return len(self.workouts) + len(self.meals)


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------


class DayAggregate(_Frozen):
    """Per-weekday rollup of a RawPlan. Always produced by ``aggregate``."""

    day: Weekday
    full_day_name: str
    total_kcal: float = 0.0  # burn_kcal + intake_kcal
    burn_kcal: float = 0.0
    intake_kcal: float = 0.0
    workouts: tuple[WorkoutEntry, ...] = ()
    meals: tuple[MealEntry, ...] = ()
    total_macros: Macros = Field(default_factory=Macros.zero)
    unestimated_workouts: int = 0  # workouts counted as 0 burn for lack of an estimate


class WeeklySummary(_Frozen):
    total_burn_kcal: float = 0.0
    total_intake_kcal: float = 0.0
    workout_count: int = 0
    meal_count: int = 0
    active_days: tuple[Weekday, ...] = ()
    rest_days: tuple[Weekday, ...] = ()
    average_daily_intake_kcal: float | None = None  # over days that have meals
    total_macros: Macros = Field(default_factory=Macros.zero)
    daily_burn_kcal: tuple[float, ...] = ()  # Sun..Sat
    daily_intake_kcal: tuple[float, ...] = ()  # Sun..Sat


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    rawResponse: str | None = None
