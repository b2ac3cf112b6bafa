"""Project a RawPlan onto the seven weekdays.

Total: always seven DayAggregate records in WEEKDAYS order, zero-filled for
days the plan does not mention. Never raises.
"""

from __future__ import annotations

from app.planner.models import DayAggregate, Macros, RawPlan, WeeklySummary
from app.planner.weekdays import WEEKDAYS, Weekday, full_day_name


def _sum_macros(macros: list[Macros]) -> Macros:
    total = Macros.zero()
    for m in macros:
        total = total + m
    return total


def aggregate_day(plan: RawPlan, day: Weekday) -> DayAggregate:
    workouts = tuple(w for w in plan.workouts if w.day == day)
    meals = tuple(m for m in plan.meals if m.day == day)

    # Missing burn estimates count as 0; see unestimated_workouts.
    burn = sum((w.estimated_burn_kcal or 0.0 for w in workouts), 0.0)
    intake = sum((m.kcal for m in meals), 0.0)

    return DayAggregate(
        day=day,
        full_day_name=full_day_name(day),
        total_kcal=burn + intake,
        burn_kcal=burn,
        intake_kcal=intake,
        workouts=workouts,
        meals=meals,
        total_macros=_sum_macros([m.macros for m in meals]),
        unestimated_workouts=sum(1 for w in workouts if w.estimated_burn_kcal is None),
    )


def aggregate(plan: RawPlan) -> list[DayAggregate]:
    return [aggregate_day(plan, day) for day in WEEKDAYS]


def summarize_week(days: list[DayAggregate]) -> WeeklySummary:
    """Week-level KPIs over the output of ``aggregate``."""
    days_with_meals = [d for d in days if d.meals]
    total_intake = sum((d.intake_kcal for d in days), 0.0)

    return WeeklySummary(
        total_burn_kcal=sum((d.burn_kcal for d in days), 0.0),
        total_intake_kcal=total_intake,
        workout_count=sum(len(d.workouts) for d in days),
        meal_count=sum(len(d.meals) for d in days),
        active_days=tuple(d.day for d in days if d.workouts),
        rest_days=tuple(d.day for d in days if not d.workouts),
        average_daily_intake_kcal=(
            total_intake / len(days_with_meals) if days_with_meals else None
        ),
        total_macros=_sum_macros([d.total_macros for d in days]),
        daily_burn_kcal=tuple(d.burn_kcal for d in days),
        daily_intake_kcal=tuple(d.intake_kcal for d in days),
    )


def summarize_plan(plan: RawPlan) -> WeeklySummary:
    return summarize_week(aggregate(plan))
