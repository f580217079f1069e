from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scheduling.clock import format_minutes, to_minutes
from scheduling.constants import (
    COUNT_FIELD,
    DURATION_FIELD,
    SHIFT_ORDER,
    SHIFT_START_FIELDS,
    Shift,
    Weekday,
)


@dataclass(frozen=True)
class ScheduleConfig:
    """Accepted schedule configuration, times held as minutes since midnight."""

    lesson_duration_minutes: int
    lessons_per_shift: int
    morning_start: int
    afternoon_start: int
    evening_start: int

    def start_of(self, shift: Shift) -> int:
        return int(getattr(self, SHIFT_START_FIELDS[Shift(shift)]))

    def end_of(self, shift: Shift) -> int:
        return self.start_of(shift) + self.shift_span

    @property
    def shift_span(self) -> int:
        return int(self.lesson_duration_minutes) * int(self.lessons_per_shift)

    @classmethod
    def from_values(cls, values: Any) -> "ScheduleConfig":
        """Build from a mapping or any object exposing the configuration fields.

        Times may be ``datetime.time``, ``"HH:MM"``/``"HH:MM:SS"`` strings or minutes.
        """

        def _get(name: str):
            if isinstance(values, dict):
                return values[name]
            return getattr(values, name)

        return cls(
            lesson_duration_minutes=int(_get(DURATION_FIELD)),
            lessons_per_shift=int(_get(COUNT_FIELD)),
            morning_start=to_minutes(_get(SHIFT_START_FIELDS[Shift.MORNING])),
            afternoon_start=to_minutes(_get(SHIFT_START_FIELDS[Shift.AFTERNOON])),
            evening_start=to_minutes(_get(SHIFT_START_FIELDS[Shift.EVENING])),
        )


@dataclass(frozen=True)
class LessonSlot:
    shift: Shift
    start: int
    end: int

    @property
    def start_label(self) -> str:
        return format_minutes(self.start)

    @property
    def end_label(self) -> str:
        return format_minutes(self.end)

    @property
    def time_range(self) -> str:
        return f"{self.start_label}-{self.end_label}"

    def key(self, weekday: Weekday) -> str:
        return f"{Weekday(weekday).value}-{self.start_label}-{self.end_label}"


@dataclass(frozen=True)
class ShiftWindow:
    shift: Shift
    start: int
    end: int

    @property
    def start_label(self) -> str:
        return format_minutes(self.start)

    @property
    def end_label(self) -> str:
        return format_minutes(self.end)


def generate_slots(config: ScheduleConfig | None, shift: Shift) -> list[LessonSlot]:
    if config is None:
        return []

    shift = Shift(shift)
    duration = int(config.lesson_duration_minutes)
    cursor = config.start_of(shift)
    slots: list[LessonSlot] = []
    for _ in range(int(config.lessons_per_shift)):
        slots.append(LessonSlot(shift=shift, start=cursor, end=cursor + duration))
        cursor += duration
    return slots


def shift_window(config: ScheduleConfig | None, shift: Shift) -> ShiftWindow | None:
    if config is None:
        return None
    shift = Shift(shift)
    return ShiftWindow(shift=shift, start=config.start_of(shift), end=config.end_of(shift))


def generate_all(config: ScheduleConfig | None) -> dict[Shift, list[LessonSlot]]:
    return {shift: generate_slots(config, shift) for shift in SHIFT_ORDER}
