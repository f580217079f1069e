from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.deps import Principal, get_current_principal, get_tenant_id
from api.tenant import get_by_id
from core.database import get_db
from models.availability_interval import AvailabilityInterval
from schemas.availability import AvailabilityCreate, AvailabilityGridOut, AvailabilityOut, AvailabilityUpdate
from services.availability_service import (
    build_grid,
    create_interval,
    delete_interval,
    list_intervals,
    update_interval_status,
)
from services.schedule_configuration_service import get_schedule_config


router = APIRouter()


def _ensure_can_view(principal: Principal, professor_id: uuid.UUID) -> None:
    if not principal.can_view_availability_of(professor_id):
        raise HTTPException(status_code=403, detail="NOT_AUTHORIZED")


def _ensure_can_edit(principal: Principal, professor_id: uuid.UUID) -> None:
    if not principal.can_edit_availability_of(professor_id):
        raise HTTPException(status_code=403, detail="NOT_AUTHORIZED")


def _get_interval(db: Session, interval_id: uuid.UUID, tenant_id: uuid.UUID | None) -> AvailabilityInterval:
    interval = get_by_id(db, AvailabilityInterval, interval_id, tenant_id)
    if interval is None:
        raise HTTPException(status_code=404, detail="INTERVAL_NOT_FOUND")
    return interval


@router.get("/", response_model=list[AvailabilityOut])
def list_availability(
    professor_id: uuid.UUID = Query(...),
    period_id: uuid.UUID = Query(...),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> list[AvailabilityOut]:
    _ensure_can_view(principal, professor_id)
    return list_intervals(db, professor_id=professor_id, period_id=period_id, tenant_id=tenant_id)


@router.get("/grid", response_model=AvailabilityGridOut)
def get_availability_grid(
    professor_id: uuid.UUID = Query(...),
    period_id: uuid.UUID = Query(...),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> AvailabilityGridOut:
    _ensure_can_view(principal, professor_id)
    config = get_schedule_config(db, tenant_id=tenant_id)
    rows = list_intervals(db, professor_id=professor_id, period_id=period_id, tenant_id=tenant_id)
    return {"professor_id": professor_id, "period_id": period_id, **build_grid(config, rows)}


@router.post("/", response_model=AvailabilityOut, status_code=201)
def create_availability(
    payload: AvailabilityCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> AvailabilityOut:
    _ensure_can_edit(principal, payload.professor_id)
    try:
        return create_interval(db, payload, tenant_id=tenant_id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="CONFLICT")


@router.patch("/{interval_id}", response_model=AvailabilityOut)
def update_availability(
    interval_id: uuid.UUID,
    payload: AvailabilityUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> AvailabilityOut:
    interval = _get_interval(db, interval_id, tenant_id)
    _ensure_can_edit(principal, interval.professor_id)
    return update_interval_status(db, interval, payload.status)


@router.delete("/{interval_id}")
def delete_availability(
    interval_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    tenant_id: uuid.UUID | None = Depends(get_tenant_id),
) -> dict:
    interval = _get_interval(db, interval_id, tenant_id)
    _ensure_can_edit(principal, interval.professor_id)
    delete_interval(db, interval)
    return {"ok": True}
