"""Tests for the plan data contract."""

import pytest
from pydantic import ValidationError

from app.planner.catalog import get_goal, list_equipment, list_goals
from app.planner.models import DayAggregate, Exercise, Macros, MealEntry, RawPlan, WorkoutEntry
from app.planner.weekdays import WEEKDAYS, Weekday, day_codes, full_day_name

from tests.conftest import make_meal, make_workout


class TestWeekdays:
    def test_canonical_order(self):
        assert day_codes() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        assert len(WEEKDAYS) == 7

    def test_full_names(self):
        assert full_day_name("Wed") == "Wednesday"
        assert full_day_name(Weekday.Sun) == "Sunday"

    def test_unknown_code_passes_through(self):
        assert full_day_name("Xyz") == "Xyz"


class TestEntries:
    def test_aliases_and_field_names(self):
        by_alias = WorkoutEntry.model_validate(make_workout(burn=250))
        by_name = WorkoutEntry(
            day=Weekday.Mon,
            title="Legs",
            estimated_burn_kcal=250,
            exercises=[Exercise(name="Squat", sets=3, reps="10")],
        )
        assert by_alias == by_name

    def test_serializes_with_model_keys(self):
        meal = MealEntry.model_validate(make_meal())
        data = meal.model_dump(mode="json", by_alias=True)
        assert set(data) == {"day", "meal", "item", "kcal", "macros"}
        assert set(data["macros"]) == {"p", "c", "f"}

    def test_frozen(self):
        meal = MealEntry.model_validate(make_meal())
        with pytest.raises(ValidationError):
            meal.kcal = 1

    def test_sets_must_be_positive_int(self):
        for sets in (0, -1, 2.5, "3", True):
            with pytest.raises(ValidationError):
                Exercise(name="Squat", sets=sets, reps=10)

    def test_empty_exercise_name_rejected(self):
        with pytest.raises(ValidationError):
            Exercise(name="", sets=3, reps=10)

    def test_macros_reject_negative(self):
        with pytest.raises(ValidationError):
            Macros(p=-1, c=0, f=0)

    def test_macros_add(self):
        assert Macros(p=1, c=2, f=3) + Macros(p=4, c=5, f=6) == Macros(p=5, c=7, f=9)


class TestDerivedDefaults:
    def test_day_aggregate_defaults(self):
        day = DayAggregate(day=Weekday.Tue, full_day_name="Tuesday")
        assert day.total_kcal == 0
        assert day.total_macros == Macros.zero()
        assert day.workouts == ()

    def test_raw_plan_entry_count(self):
        plan = RawPlan.model_validate({"workouts": [make_workout()], "meals": [make_meal(), make_meal("Tue")]})
        assert plan.entry_count == 3


class TestCatalog:
    def test_three_goals(self):
        assert [g.value.value for g in list_goals()] == ["fat_loss", "build_muscle", "maintain_weight"]

    def test_get_goal(self):
        assert get_goal("fat_loss").label == "Lose Fat"
        assert get_goal("nope") is None

    def test_equipment_options(self):
        assert len(list_equipment()) == 5
