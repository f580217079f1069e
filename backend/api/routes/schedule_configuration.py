from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.deps import CONFIGURATION_READERS, CONFIGURATION_WRITERS, get_tenant_id, require_roles
from core.database import get_db
from schemas.schedule_configuration import ScheduleConfigurationOut, ScheduleConfigurationUpsert
from scheduling.errors import ConfigurationInvalid
from scheduling.validation import validate_configuration
from services.schedule_configuration_service import (
    describe_configuration,
    load_configuration,
    merge_values,
    upsert_configuration,
)


router = APIRouter()


def _invalid(errors) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "code": "INVALID_SCHEDULE_CONFIGURATION",
            "errors": [e.as_dict() for e in errors],
        },
    )


@router.get("/", response_model=ScheduleConfigurationOut)
def get_schedule_configuration(
    _reader=Depends(require_roles(*CONFIGURATION_READERS)),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> ScheduleConfigurationOut:
    row = load_configuration(db, tenant_id=tenant_id)
    if row is None:
        raise HTTPException(status_code=404, detail="SCHEDULE_CONFIGURATION_NOT_FOUND")
    return describe_configuration(row)


@router.put("/", response_model=ScheduleConfigurationOut)
def put_schedule_configuration(
    payload: ScheduleConfigurationUpsert,
    _writer=Depends(require_roles(*CONFIGURATION_WRITERS)),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> ScheduleConfigurationOut:
    try:
        row = upsert_configuration(db, payload.model_dump(exclude_unset=True), tenant_id=tenant_id)
    except ConfigurationInvalid as exc:
        raise _invalid(exc.errors)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")
    return describe_configuration(row)


@router.post("/validate")
def validate_schedule_configuration(
    payload: ScheduleConfigurationUpsert,
    _writer=Depends(require_roles(*CONFIGURATION_WRITERS)),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> dict:
    """Dry run of PUT: report every field error without storing anything."""

    merged = merge_values(load_configuration(db, tenant_id=tenant_id), payload.model_dump(exclude_unset=True))
    errors = validate_configuration(merged)
    return {"valid": not errors, "errors": [e.as_dict() for e in errors]}
