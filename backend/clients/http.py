from __future__ import annotations

import logging
from typing import Any

import httpx

from scheduling.clock import format_minutes
from scheduling.constants import AvailabilityStatus, Weekday
from scheduling.errors import (
    AvailabilitySourceError,
    ConfigurationInvalid,
    ConfigurationSourceError,
    FieldError,
    Forbidden,
)
from scheduling.reconcile import AvailabilityRecord
from scheduling.slots import ScheduleConfig
from scheduling.sources import ConfigurationView


logger = logging.getLogger(__name__)


def _detail(resp: httpx.Response) -> Any:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text
    if isinstance(payload, dict) and "detail" in payload:
        return payload["detail"]
    return payload


def _describe(resp: httpx.Response) -> str:
    detail = _detail(resp)
    if isinstance(detail, dict):
        detail = detail.get("code") or detail.get("message") or detail
    return f"HTTP {resp.status_code}: {detail}"


class HttpConfigurationSource:
    """Reads and upserts the schedule configuration through the HTTP API."""

    def __init__(self, client: httpx.AsyncClient, *, base_path: str = "/api/schedule-configuration") -> None:
        self.client = client
        self.base_path = base_path.rstrip("/")

    async def get_configuration(self) -> ConfigurationView:
        try:
            resp = await self.client.get(f"{self.base_path}/")
        except httpx.HTTPError as exc:
            raise ConfigurationSourceError(f"configuration request failed: {exc}") from exc

        if resp.status_code == 403:
            # Professors cannot read the configuration; show them the unconfigured state.
            logger.info("Schedule configuration not visible to this user (403)")
            return ConfigurationView(configuration=None, has_permission=False)
        if resp.status_code == 404:
            return ConfigurationView(configuration=None, has_permission=True)
        if resp.status_code >= 400:
            raise ConfigurationSourceError(_describe(resp), status_code=resp.status_code)
        return ConfigurationView(configuration=ScheduleConfig.from_values(resp.json()))

    async def upsert_configuration(self, values: dict[str, Any]) -> ScheduleConfig:
        try:
            resp = await self.client.put(f"{self.base_path}/", json=values)
        except httpx.HTTPError as exc:
            raise ConfigurationSourceError(f"configuration request failed: {exc}") from exc

        if resp.status_code == 400:
            detail = _detail(resp)
            raw_errors = detail.get("errors", []) if isinstance(detail, dict) else []
            raise ConfigurationInvalid(
                [FieldError(e["field"], e.get("code", "INVALID"), e.get("message", "")) for e in raw_errors]
            )
        if resp.status_code == 403:
            raise Forbidden("not allowed to change the schedule configuration")
        if resp.status_code >= 400:
            raise ConfigurationSourceError(_describe(resp), status_code=resp.status_code)
        return ScheduleConfig.from_values(resp.json())


class HttpAvailabilitySource:
    """Availability store contract over the HTTP API; every failure becomes AvailabilitySourceError."""

    def __init__(self, client: httpx.AsyncClient, *, base_path: str = "/api/availability") -> None:
        self.client = client
        self.base_path = base_path.rstrip("/")

    async def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise AvailabilitySourceError(operation, f"{operation} request failed: {exc}") from exc
        if resp.status_code >= 400:
            raise AvailabilitySourceError(operation, _describe(resp), status_code=resp.status_code)
        return resp

    async def list_intervals(self, professor_id: Any, period_id: Any) -> list[AvailabilityRecord]:
        resp = await self._request(
            "list",
            "GET",
            f"{self.base_path}/",
            params={"professor_id": str(professor_id), "period_id": str(period_id)},
        )
        return [AvailabilityRecord.from_row(item) for item in resp.json()]

    async def create_interval(
        self,
        professor_id: Any,
        period_id: Any,
        weekday: Weekday,
        start: int,
        end: int,
        status: AvailabilityStatus,
    ) -> AvailabilityRecord:
        resp = await self._request(
            "create",
            "POST",
            f"{self.base_path}/",
            json={
                "professor_id": str(professor_id),
                "period_id": str(period_id),
                "weekday": Weekday(weekday).value,
                "start_time": format_minutes(start),
                "end_time": format_minutes(end),
                "status": AvailabilityStatus(status).value,
            },
        )
        return AvailabilityRecord.from_row(resp.json())

    async def update_interval(self, interval_id: Any, status: AvailabilityStatus) -> AvailabilityRecord:
        resp = await self._request(
            "update",
            "PATCH",
            f"{self.base_path}/{interval_id}",
            json={"status": AvailabilityStatus(status).value},
        )
        return AvailabilityRecord.from_row(resp.json())

    async def delete_interval(self, interval_id: Any) -> None:
        await self._request("delete", "DELETE", f"{self.base_path}/{interval_id}")
