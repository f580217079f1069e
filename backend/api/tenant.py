from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session


def where_tenant(stmt, model, tenant_id: uuid.UUID | None):
    # Shared mode scopes to tenant_id IS NULL so a shared deployment never
    # sees per-tenant rows.
    if tenant_id is None:
        return stmt.where(model.tenant_id.is_(None))
    return stmt.where(model.tenant_id == tenant_id)


def get_by_id(db: Session, model, obj_id: uuid.UUID, tenant_id: uuid.UUID | None):
    q = select(model).where(model.id == obj_id)
    q = where_tenant(q, model, tenant_id)
    return db.execute(q).scalars().first()


def get_singleton(db: Session, model, tenant_id: uuid.UUID | None):
    """Return the one row of a per-institution model (None when not created yet)."""

    q = where_tenant(select(model), model, tenant_id).order_by(model.created_at.asc()).limit(1)
    return db.execute(q).scalars().first()
