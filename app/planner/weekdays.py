"""Canonical weekday table.

Every day-indexed structure (aggregation, rendering, summaries) iterates
WEEKDAYS rather than the order entries arrived in, so output is always
Sun → Sat no matter how the model ordered its plan.
"""

from __future__ import annotations

from enum import Enum


class Weekday(str, Enum):
    Sun = "Sun"
    Mon = "Mon"
    Tue = "Tue"
    Wed = "Wed"
    Thu = "Thu"
    Fri = "Fri"
    Sat = "Sat"


WEEKDAYS: tuple[Weekday, ...] = (
    Weekday.Sun,
    Weekday.Mon,
    Weekday.Tue,
    Weekday.Wed,
    Weekday.Thu,
    Weekday.Fri,
    Weekday.Sat,
)

FULL_DAY_NAMES: dict[Weekday, str] = {
    Weekday.Sun: "Sunday",
    Weekday.Mon: "Monday",
    Weekday.Tue: "Tuesday",
    Weekday.Wed: "Wednesday",
    Weekday.Thu: "Thursday",
    Weekday.Fri: "Friday",
    Weekday.Sat: "Saturday",
}


def full_day_name(day: Weekday | str) -> str:
    """Full English name for a day code; unknown codes are returned unchanged."""
    try:
        return FULL_DAY_NAMES[Weekday(day)]
    except ValueError:
        return str(day)


def day_codes() -> list[str]:
    return [d.value for d in WEEKDAYS]
