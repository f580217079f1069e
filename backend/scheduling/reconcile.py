from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from scheduling.clock import format_minutes, to_minutes
from scheduling.constants import AvailabilityStatus, CellState, Weekday
from scheduling.slots import LessonSlot


@dataclass(frozen=True)
class AvailabilityRecord:
    """A stored availability interval, times as minutes since midnight."""

    id: Any
    weekday: Weekday
    start: int
    end: int
    status: AvailabilityStatus
    professor_id: Any | None = None
    period_id: Any | None = None

    @property
    def time_range(self) -> str:
        return f"{format_minutes(self.start)}-{format_minutes(self.end)}"

    @classmethod
    def from_row(cls, row: Any) -> "AvailabilityRecord":
        """Build from an ORM row, a response schema or a plain mapping."""

        def _get(name: str):
            if isinstance(row, dict):
                return row.get(name)
            return getattr(row, name, None)

        return cls(
            id=_get("id"),
            weekday=Weekday(_get("weekday")),
            start=to_minutes(_get("start_time")),
            end=to_minutes(_get("end_time")),
            status=AvailabilityStatus(_get("status")),
            professor_id=_get("professor_id"),
            period_id=_get("period_id"),
        )


@dataclass(frozen=True)
class Cell:
    weekday: Weekday
    slot: LessonSlot
    state: CellState
    interval: AvailabilityRecord | None = None
    valid: bool = True

    @property
    def key(self) -> str:
        return self.slot.key(self.weekday)


@dataclass(frozen=True)
class AvailabilitySummary:
    available: int
    unavailable: int
    empty: int
    total: int


def overlaps(start: int, end: int, slot: LessonSlot) -> bool:
    # Containment either way, or a plain intersection. Only zero-length records
    # tell the first two cases apart from the third.
    return (
        (start <= slot.start and end >= slot.end)
        or (slot.start <= start and slot.end >= end)
        or (start < slot.end and end > slot.start)
    )


def find_match(
    slot: LessonSlot,
    weekday: Weekday,
    intervals: Iterable[AvailabilityRecord],
) -> AvailabilityRecord | None:
    """Return the first interval (in iteration order) that covers ``slot`` on ``weekday``."""

    weekday = Weekday(weekday)
    for interval in intervals:
        if Weekday(interval.weekday) != weekday:
            continue
        if overlaps(int(interval.start), int(interval.end), slot):
            return interval
    return None


def reconcile(
    slots: Sequence[LessonSlot],
    weekday: Weekday,
    intervals: Sequence[AvailabilityRecord],
) -> list[Cell]:
    weekday = Weekday(weekday)
    same_day = [i for i in intervals if Weekday(i.weekday) == weekday]

    cells: list[Cell] = []
    for slot in slots:
        match = find_match(slot, weekday, same_day)
        if match is None:
            cells.append(Cell(weekday=weekday, slot=slot, state=CellState.EMPTY))
            continue
        cells.append(
            Cell(
                weekday=weekday,
                slot=slot,
                state=CellState(AvailabilityStatus(match.status).value),
                interval=match,
            )
        )
    return cells


def summarize(cells: Iterable[Cell]) -> AvailabilitySummary:
    available = unavailable = empty = 0
    for cell in cells:
        if not cell.valid:
            continue
        if cell.state == CellState.AVAILABLE:
            available += 1
        elif cell.state == CellState.UNAVAILABLE:
            unavailable += 1
        else:
            empty += 1
    return AvailabilitySummary(
        available=available,
        unavailable=unavailable,
        empty=empty,
        total=available + unavailable + empty,
    )
