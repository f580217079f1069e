from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, Time, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from models.base import Base


class ScheduleConfiguration(Base):
    __tablename__ = "schedule_configurations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    lesson_duration_minutes = Column(Integer, nullable=False)
    lessons_per_shift = Column(Integer, nullable=False)
    morning_start = Column(Time, nullable=False)
    afternoon_start = Column(Time, nullable=False)
    evening_start = Column(Time, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "lesson_duration_minutes >= 1 and lesson_duration_minutes <= 120",
            name="ck_schedule_configurations_duration",
        ),
        CheckConstraint(
            "lessons_per_shift >= 1 and lessons_per_shift <= 20",
            name="ck_schedule_configurations_count",
        ),
        CheckConstraint(
            "lesson_duration_minutes * lessons_per_shift <= 360",
            name="ck_schedule_configurations_span",
        ),
        UniqueConstraint("tenant_id", name="uq_schedule_configurations_tenant"),
        # NULLs never collide under the unique constraint: at most one shared (NULL tenant) row.
        Index(
            "ux_schedule_configurations_shared",
            tenant_id.is_(None),
            unique=True,
            postgresql_where=tenant_id.is_(None),
            sqlite_where=tenant_id.is_(None),
        ),
    )
