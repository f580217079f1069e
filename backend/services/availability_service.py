from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from api.tenant import where_tenant
from models.availability_interval import AvailabilityInterval
from schemas.availability import AvailabilityCreate
from scheduling.constants import SHIFT_ORDER, WEEKDAYS, AvailabilityStatus
from scheduling.reconcile import AvailabilityRecord, Cell, reconcile, summarize
from scheduling.slots import ScheduleConfig, generate_slots, shift_window


logger = logging.getLogger(__name__)


def list_intervals(
    db: Session,
    *,
    professor_id: uuid.UUID,
    period_id: uuid.UUID,
    tenant_id: uuid.UUID | None,
) -> list[AvailabilityInterval]:
    # Declaration order: reconciliation takes the first matching interval.
    q = (
        where_tenant(select(AvailabilityInterval), AvailabilityInterval, tenant_id)
        .where(AvailabilityInterval.professor_id == professor_id)
        .where(AvailabilityInterval.period_id == period_id)
        .order_by(AvailabilityInterval.created_at.asc(), AvailabilityInterval.id.asc())
    )
    return list(db.execute(q).scalars().all())


def create_interval(db: Session, payload: AvailabilityCreate, *, tenant_id: uuid.UUID | None) -> AvailabilityInterval:
    interval = AvailabilityInterval(
        tenant_id=tenant_id,
        professor_id=payload.professor_id,
        period_id=payload.period_id,
        weekday=payload.weekday.value,
        start_time=payload.start_time,
        end_time=payload.end_time,
        status=payload.status.value,
    )
    db.add(interval)
    db.commit()
    db.refresh(interval)
    logger.debug(
        "Availability %s created: %s %s-%s %s",
        interval.id,
        interval.weekday,
        interval.start_time,
        interval.end_time,
        interval.status,
    )
    return interval


def update_interval_status(db: Session, interval: AvailabilityInterval, status: AvailabilityStatus) -> AvailabilityInterval:
    interval.status = AvailabilityStatus(status).value
    db.commit()
    db.refresh(interval)
    return interval


def delete_interval(db: Session, interval: AvailabilityInterval) -> None:
    db.delete(interval)
    db.commit()


def _cell_out(cell: Cell) -> dict[str, Any]:
    return {
        "weekday": cell.weekday,
        "start": cell.slot.start_label,
        "end": cell.slot.end_label,
        "state": cell.state,
        "interval_id": cell.interval.id if cell.interval is not None else None,
    }


def build_grid(config: ScheduleConfig | None, rows: Iterable[Any]) -> dict[str, Any]:
    """Reconcile stored intervals against every generated slot, per shift and weekday."""

    records = [AvailabilityRecord.from_row(r) for r in rows]
    if config is None:
        return {
            "configured": False,
            "shifts": [],
            "summary": {"available": 0, "unavailable": 0, "empty": 0, "total": 0},
        }

    shifts: list[dict[str, Any]] = []
    all_cells: list[Cell] = []
    for shift in SHIFT_ORDER:
        slots = generate_slots(config, shift)
        by_day = {day: reconcile(slots, day, records) for day in WEEKDAYS}
        for cells in by_day.values():
            all_cells.extend(cells)

        window = shift_window(config, shift)
        shifts.append(
            {
                "shift": shift.value,
                "start": window.start_label,
                "end": window.end_label,
                "rows": [
                    {
                        "start": slot.start_label,
                        "end": slot.end_label,
                        "cells": [_cell_out(by_day[day][i]) for day in WEEKDAYS],
                    }
                    for i, slot in enumerate(slots)
                ],
            }
        )

    s = summarize(all_cells)
    return {
        "configured": True,
        "shifts": shifts,
        "summary": {"available": s.available, "unavailable": s.unavailable, "empty": s.empty, "total": s.total},
    }
