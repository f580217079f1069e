from __future__ import annotations

import uuid
from datetime import datetime, time

from pydantic import BaseModel, Field, model_validator

from scheduling.constants import AvailabilityStatus, CellState, Weekday


class AvailabilityCreate(BaseModel):
    professor_id: uuid.UUID
    period_id: uuid.UUID
    weekday: Weekday
    start_time: time
    end_time: time
    status: AvailabilityStatus = AvailabilityStatus.AVAILABLE

    @model_validator(mode="after")
    def _check_order(self) -> "AvailabilityCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityUpdate(BaseModel):
    status: AvailabilityStatus


class AvailabilityOut(BaseModel):
    id: uuid.UUID
    professor_id: uuid.UUID
    period_id: uuid.UUID
    weekday: Weekday
    start_time: time
    end_time: time
    status: AvailabilityStatus
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class CellOut(BaseModel):
    weekday: Weekday
    start: str
    end: str
    state: CellState
    interval_id: uuid.UUID | None = None


class GridRowOut(BaseModel):
    start: str
    end: str
    cells: list[CellOut]


class GridShiftOut(BaseModel):
    shift: str
    start: str
    end: str
    rows: list[GridRowOut]


class AvailabilitySummaryOut(BaseModel):
    available: int = Field(ge=0)
    unavailable: int = Field(ge=0)
    empty: int = Field(ge=0)
    total: int = Field(ge=0)


class AvailabilityGridOut(BaseModel):
    professor_id: uuid.UUID
    period_id: uuid.UUID
    configured: bool
    shifts: list[GridShiftOut] = Field(default_factory=list)
    summary: AvailabilitySummaryOut
