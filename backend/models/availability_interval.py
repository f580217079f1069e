from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, String, Time, Uuid
from sqlalchemy.sql import func

from models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AvailabilityInterval(Base):
    __tablename__ = "availability_intervals"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    professor_id = Column(Uuid(as_uuid=True), nullable=False)
    period_id = Column(Uuid(as_uuid=True), nullable=False)

    weekday = Column(String(16), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(16), nullable=False, default="AVAILABLE")

    # Microsecond client-side stamp keeps listing order equal to declaration order.
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "weekday in ('MONDAY','TUESDAY','WEDNESDAY','THURSDAY','FRIDAY','SATURDAY')",
            name="ck_availability_intervals_weekday",
        ),
        CheckConstraint("status in ('AVAILABLE','UNAVAILABLE')", name="ck_availability_intervals_status"),
        CheckConstraint("end_time > start_time", name="ck_availability_intervals_order"),
        Index("ix_availability_intervals_professor_period", "professor_id", "period_id"),
    )
