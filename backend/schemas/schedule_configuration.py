from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class ScheduleConfigurationUpsert(BaseModel):
    """Partial or full configuration as submitted by a form.

    Values stay loosely typed so that every problem is reported by the
    configuration validator, field by field, instead of failing request parsing.
    """

    lesson_duration_minutes: int | float | str | None = None
    lessons_per_shift: int | float | str | None = None
    morning_start: str | None = None
    afternoon_start: str | None = None
    evening_start: str | None = None


class LessonSlotOut(BaseModel):
    start: str
    end: str


class ShiftOut(BaseModel):
    shift: str
    start: str
    end: str
    lessons: list[LessonSlotOut]


class ScheduleConfigurationOut(BaseModel):
    id: uuid.UUID
    lesson_duration_minutes: int
    lessons_per_shift: int
    morning_start: str
    afternoon_start: str
    evening_start: str

    # Derived on read.
    morning_end: str
    afternoon_end: str
    evening_end: str
    shift_span_minutes: int
    shifts: list[ShiftOut]

    updated_at: datetime | None = None
