from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# Institutional limits for the schedule configuration.
MAX_SHIFT_SPAN_MINUTES = 360
MAX_LESSON_DURATION_MINUTES = 120
MAX_LESSONS_PER_SHIFT = 20

# Last representable minute of the day; slots never wrap past midnight.
LAST_MINUTE_OF_DAY = 23 * 60 + 59


class Shift(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class CellState(str, Enum):
    EMPTY = "EMPTY"
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    PENDING = "PENDING"


@dataclass(frozen=True)
class ShiftLimits:
    label: str
    earliest_start: str
    latest_start: str


SHIFT_ORDER: tuple[Shift, ...] = (Shift.MORNING, Shift.AFTERNOON, Shift.EVENING)
WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)

SHIFT_LIMITS: dict[Shift, ShiftLimits] = {
    Shift.MORNING: ShiftLimits(label="morning", earliest_start="06:00", latest_start="12:00"),
    Shift.AFTERNOON: ShiftLimits(label="afternoon", earliest_start="12:00", latest_start="18:00"),
    # 23:59 so an evening shift may still start close to midnight.
    Shift.EVENING: ShiftLimits(label="evening", earliest_start="18:00", latest_start="23:59"),
}

# Raw field names shared by the validator, the HTTP schemas and the ORM row.
DURATION_FIELD = "lesson_duration_minutes"
COUNT_FIELD = "lessons_per_shift"
SHIFT_START_FIELDS: dict[Shift, str] = {
    Shift.MORNING: "morning_start",
    Shift.AFTERNOON: "afternoon_start",
    Shift.EVENING: "evening_start",
}
