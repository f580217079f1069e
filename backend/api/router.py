from __future__ import annotations

from fastapi import APIRouter

from api.routes import availability, schedule_configuration


api_router = APIRouter()
api_router.include_router(
    schedule_configuration.router,
    prefix="/schedule-configuration",
    tags=["schedule-configuration"],
)
api_router.include_router(availability.router, prefix="/availability", tags=["availability"])
