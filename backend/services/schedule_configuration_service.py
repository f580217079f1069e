from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from api.tenant import get_singleton
from models.schedule_configuration import ScheduleConfiguration
from scheduling.clock import format_minutes, minutes_to_time, parse_hhmm, to_minutes
from scheduling.constants import COUNT_FIELD, DURATION_FIELD, SHIFT_ORDER, SHIFT_START_FIELDS
from scheduling.slots import ScheduleConfig, generate_slots, shift_window
from scheduling.validation import ensure_valid


logger = logging.getLogger(__name__)

CONFIGURATION_FIELDS = (DURATION_FIELD, COUNT_FIELD, *SHIFT_START_FIELDS.values())


def load_configuration(db: Session, *, tenant_id: uuid.UUID | None) -> ScheduleConfiguration | None:
    return get_singleton(db, ScheduleConfiguration, tenant_id)


def to_schedule_config(row: ScheduleConfiguration | None) -> ScheduleConfig | None:
    if row is None:
        return None
    return ScheduleConfig.from_values(row)


def get_schedule_config(db: Session, *, tenant_id: uuid.UUID | None) -> ScheduleConfig | None:
    return to_schedule_config(load_configuration(db, tenant_id=tenant_id))


def _form_values(row: ScheduleConfiguration | None) -> dict[str, Any]:
    if row is None:
        return {}
    values: dict[str, Any] = {
        DURATION_FIELD: row.lesson_duration_minutes,
        COUNT_FIELD: row.lessons_per_shift,
    }
    for field in SHIFT_START_FIELDS.values():
        values[field] = format_minutes(to_minutes(getattr(row, field)))
    return values


def _as_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def merge_values(row: ScheduleConfiguration | None, updates: dict[str, Any]) -> dict[str, Any]:
    """Overlay submitted fields on the stored configuration (unset fields keep their value)."""

    merged = _form_values(row)
    for field in CONFIGURATION_FIELDS:
        if field in updates and updates[field] is not None:
            merged[field] = updates[field]
    return merged


def upsert_configuration(
    db: Session,
    updates: dict[str, Any],
    *,
    tenant_id: uuid.UUID | None,
) -> ScheduleConfiguration:
    """Validate and store the institution's configuration.

    Raises ConfigurationInvalid with every field error when the merged values
    break a constraint; nothing is written in that case.
    """

    row = load_configuration(db, tenant_id=tenant_id)
    merged = merge_values(row, updates)
    ensure_valid(merged)

    if row is None:
        row = ScheduleConfiguration(tenant_id=tenant_id)
        db.add(row)

    row.lesson_duration_minutes = _as_int(merged[DURATION_FIELD])
    row.lessons_per_shift = _as_int(merged[COUNT_FIELD])
    for field in SHIFT_START_FIELDS.values():
        setattr(row, field, minutes_to_time(parse_hhmm(str(merged[field]))))

    db.commit()
    db.refresh(row)
    logger.info(
        "Schedule configuration stored (tenant=%s, %s min x %s lessons)",
        tenant_id,
        row.lesson_duration_minutes,
        row.lessons_per_shift,
    )
    return row


def describe_configuration(row: ScheduleConfiguration) -> dict[str, Any]:
    config = to_schedule_config(row)
    out: dict[str, Any] = {
        "id": row.id,
        DURATION_FIELD: config.lesson_duration_minutes,
        COUNT_FIELD: config.lessons_per_shift,
        "shift_span_minutes": config.shift_span,
        "updated_at": row.updated_at,
        "shifts": [],
    }
    for shift in SHIFT_ORDER:
        window = shift_window(config, shift)
        prefix = shift.value.lower()
        out[f"{prefix}_start"] = window.start_label
        out[f"{prefix}_end"] = window.end_label
        out["shifts"].append(
            {
                "shift": shift.value,
                "start": window.start_label,
                "end": window.end_label,
                "lessons": [
                    {"start": s.start_label, "end": s.end_label} for s in generate_slots(config, shift)
                ],
            }
        )
    return out
