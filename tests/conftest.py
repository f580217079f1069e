from __future__ import annotations

import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")
os.environ.setdefault("TENANT_MODE", "shared")

import pytest
from fastapi.testclient import TestClient

from core.database import ENGINE
from core.security import create_access_token
from main import app
from models import Base


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def auth_headers(role: str, user_id: uuid.UUID | None = None, tenant_id: uuid.UUID | None = None) -> dict[str, str]:
    token = create_access_token(
        user_id=str(user_id or uuid.uuid4()),
        role=role,
        tenant_id=str(tenant_id) if tenant_id else None,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def director_headers() -> dict[str, str]:
    return auth_headers("DIRECTOR")


@pytest.fixture()
def coordinator_headers() -> dict[str, str]:
    return auth_headers("COORDINATOR")


@pytest.fixture()
def professor_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def period_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def professor_headers(professor_id: uuid.UUID) -> dict[str, str]:
    return auth_headers("PROFESSOR", user_id=professor_id)


VALID_CONFIGURATION = {
    "lesson_duration_minutes": 50,
    "lessons_per_shift": 5,
    "morning_start": "07:30",
    "afternoon_start": "13:00",
    "evening_start": "18:30",
}
