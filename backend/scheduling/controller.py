from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from scheduling.constants import WEEKDAYS, AvailabilityStatus, CellState, Shift, Weekday
from scheduling.errors import AvailabilitySourceError, MutationFailed, StaleSlotReference
from scheduling.reconcile import AvailabilityRecord, Cell, find_match, reconcile
from scheduling.slots import LessonSlot, ScheduleConfig, generate_slots
from scheduling.sources import AvailabilitySource


logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Transition:
    operation: Operation
    resulting_state: CellState


TRANSITIONS: dict[CellState, Transition] = {
    CellState.EMPTY: Transition(Operation.CREATE, CellState.AVAILABLE),
    CellState.AVAILABLE: Transition(Operation.UPDATE, CellState.UNAVAILABLE),
    CellState.UNAVAILABLE: Transition(Operation.DELETE, CellState.EMPTY),
}


def next_transition(state: CellState) -> Transition | None:
    """Store operation for activating a cell in ``state`` (None while PENDING)."""

    return TRANSITIONS.get(CellState(state))


@dataclass(frozen=True)
class Notification:
    level: str  # success, error
    title: str
    description: str
    operation: Operation
    key: str


@dataclass(frozen=True)
class GridRow:
    slot: LessonSlot
    cells: list[Cell]


_SUCCESS_TEXT = {
    Operation.CREATE: ("Availability created", "marked as available"),
    Operation.UPDATE: ("Availability updated", "marked as unavailable"),
    Operation.DELETE: ("Availability removed", "cleared"),
}


def _log_notification(notification: Notification) -> None:
    level = logging.INFO if notification.level == "success" else logging.WARNING
    logger.log(level, "%s: %s", notification.title, notification.description)


class CellController:
    """Turns cell activations into create/update/delete calls for one (professor, period) view.

    At most one mutation per slot key is outstanding at a time; activations that
    arrive while their key is in flight are dropped. After every successful
    mutation the interval list is fetched again so every cell is reconciled
    against the store.
    """

    def __init__(
        self,
        source: AvailabilitySource,
        *,
        professor_id: Any,
        period_id: Any,
        configuration: ScheduleConfig | None,
        readonly: bool = False,
        notify: Callable[[Notification], None] | None = None,
    ) -> None:
        self.source = source
        self.professor_id = professor_id
        self.period_id = period_id
        self.readonly = bool(readonly)
        self._configuration = configuration
        self._notify = notify or _log_notification
        self._intervals: list[AvailabilityRecord] = []
        self._in_flight: set[str] = set()
        self._closed = False

    @property
    def configuration(self) -> ScheduleConfig | None:
        return self._configuration

    def set_configuration(self, configuration: ScheduleConfig | None) -> None:
        self._configuration = configuration

    @property
    def intervals(self) -> tuple[AvailabilityRecord, ...]:
        return tuple(self._intervals)

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def refresh(self) -> list[AvailabilityRecord]:
        records = await self.source.list_intervals(self.professor_id, self.period_id)
        if not self._closed:
            self._intervals = list(records)
        return list(records)

    def slots(self, shift: Shift) -> list[LessonSlot]:
        return generate_slots(self._configuration, shift)

    def is_valid_slot(self, slot: LessonSlot) -> bool:
        return slot in self.slots(slot.shift)

    def _with_pending(self, cell: Cell) -> Cell:
        if cell.key not in self._in_flight:
            return cell
        return Cell(weekday=cell.weekday, slot=cell.slot, state=CellState.PENDING, interval=cell.interval)

    def _reconciled_cell(self, weekday: Weekday, slot: LessonSlot) -> Cell:
        match = find_match(slot, weekday, self._intervals)
        if match is None:
            return Cell(weekday=weekday, slot=slot, state=CellState.EMPTY)
        return Cell(weekday=weekday, slot=slot, state=CellState(AvailabilityStatus(match.status).value), interval=match)

    def cell_for(self, weekday: Weekday, slot: LessonSlot) -> Cell:
        weekday = Weekday(weekday)
        if not self.is_valid_slot(slot):
            return Cell(weekday=weekday, slot=slot, state=CellState.EMPTY, valid=False)
        return self._with_pending(self._reconciled_cell(weekday, slot))

    def cells(self, weekday: Weekday, shift: Shift) -> list[Cell]:
        return [self._with_pending(c) for c in reconcile(self.slots(shift), weekday, self._intervals)]

    def grid(self, shift: Shift) -> list[GridRow]:
        by_day = {day: self.cells(day, shift) for day in WEEKDAYS}
        return [
            GridRow(slot=slot, cells=[by_day[day][i] for day in WEEKDAYS])
            for i, slot in enumerate(self.slots(shift))
        ]

    async def activate(self, weekday: Weekday, slot: LessonSlot) -> Cell | None:
        """Advance the cell one step through EMPTY -> AVAILABLE -> UNAVAILABLE -> EMPTY.

        Returns the reconciled cell once the mutation settles, or None when the
        activation was ignored (readonly view, closed view, stale slot, or a
        mutation for the same key already in flight).
        """

        weekday = Weekday(weekday)
        key = slot.key(weekday)

        if self._closed:
            return None
        if self.readonly:
            logger.debug("Ignoring activation of %s: readonly view", key)
            return None
        if not self.is_valid_slot(slot):
            logger.debug("Ignoring activation: %s", StaleSlotReference(key))
            return None
        if key in self._in_flight:
            logger.debug("Ignoring activation of %s: mutation already in flight", key)
            return None

        current = self._reconciled_cell(weekday, slot)
        transition = next_transition(current.state)
        operation = transition.operation

        self._in_flight.add(key)
        try:
            try:
                record = await self._apply(operation, weekday, slot, current.interval)
            except AvailabilitySourceError as exc:
                failure = MutationFailed(operation.value, slot.time_range, exc)
                logger.warning("%s", failure)
                if self._closed:
                    return None
                self._notify(
                    Notification(
                        level="error",
                        title=f"Could not {operation.value} availability",
                        description=f"{weekday.value} {slot.time_range}: {exc}",
                        operation=operation,
                        key=key,
                    )
                )
                return self._reconciled_cell(weekday, slot)

            if self._closed:
                return None

            self._patch(operation, current.interval, record)
            try:
                await self.refresh()
            except AvailabilitySourceError as exc:
                logger.warning("Re-fetch after %s of %s failed: %s", operation.value, key, exc)

            title, outcome = _SUCCESS_TEXT[operation]
            self._notify(
                Notification(
                    level="success",
                    title=title,
                    description=f"{weekday.value} {slot.time_range} {outcome}",
                    operation=operation,
                    key=key,
                )
            )
            return self._reconciled_cell(weekday, slot)
        finally:
            self._in_flight.discard(key)

    async def _apply(
        self,
        operation: Operation,
        weekday: Weekday,
        slot: LessonSlot,
        interval: AvailabilityRecord | None,
    ) -> AvailabilityRecord | None:
        if operation == Operation.CREATE:
            return await self.source.create_interval(
                self.professor_id,
                self.period_id,
                weekday,
                slot.start,
                slot.end,
                AvailabilityStatus.AVAILABLE,
            )
        if operation == Operation.UPDATE:
            return await self.source.update_interval(interval.id, AvailabilityStatus.UNAVAILABLE)
        await self.source.delete_interval(interval.id)
        return None

    def _patch(
        self,
        operation: Operation,
        previous: AvailabilityRecord | None,
        record: AvailabilityRecord | None,
    ) -> None:
        # Local patch only; the re-fetch that follows is authoritative.
        if operation == Operation.CREATE and record is not None:
            self._intervals.append(record)
        elif operation == Operation.UPDATE and record is not None:
            self._intervals = [record if i.id == record.id else i for i in self._intervals]
        elif operation == Operation.DELETE and previous is not None:
            self._intervals = [i for i in self._intervals if i.id != previous.id]
