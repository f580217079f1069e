from __future__ import annotations

import asyncio

import httpx
import pytest

from clients.http import HttpAvailabilitySource, HttpConfigurationSource
from conftest import VALID_CONFIGURATION
from main import app
from scheduling.constants import AvailabilityStatus, CellState, Shift, Weekday
from scheduling.controller import CellController
from scheduling.errors import AvailabilitySourceError, ConfigurationInvalid, Forbidden, NotConfigured
from scheduling.slots import ScheduleConfig, generate_slots


def _asgi_client(headers: dict[str, str]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver", headers=headers)


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://store")


def test_professor_sees_no_permission_instead_of_error(client, director_headers, professor_headers) -> None:
    client.put("/api/schedule-configuration/", json=VALID_CONFIGURATION, headers=director_headers)

    async def scenario():
        async with _asgi_client(professor_headers) as http:
            return await HttpConfigurationSource(http).get_configuration()

    view = asyncio.run(scenario())
    assert view.configuration is None
    assert view.has_permission is False
    assert view.is_configured is False
    with pytest.raises(Forbidden):
        view.require()


def test_missing_configuration_is_not_an_error(coordinator_headers) -> None:
    async def scenario():
        async with _asgi_client(coordinator_headers) as http:
            return await HttpConfigurationSource(http).get_configuration()

    view = asyncio.run(scenario())
    assert view.configuration is None
    assert view.has_permission is True
    with pytest.raises(NotConfigured):
        view.require()


def test_upsert_round_trip_and_field_errors(director_headers) -> None:
    async def scenario():
        async with _asgi_client(director_headers) as http:
            source = HttpConfigurationSource(http)
            stored = await source.upsert_configuration(VALID_CONFIGURATION)
            with pytest.raises(ConfigurationInvalid) as exc_info:
                await source.upsert_configuration({"lesson_duration_minutes": 120, "lessons_per_shift": 4})
            view = await source.get_configuration()
            return stored, exc_info.value, view

    stored, invalid, view = asyncio.run(scenario())
    assert stored.morning_start == 7 * 60 + 30
    assert {e.field for e in invalid.errors} >= {"lesson_duration_minutes", "lessons_per_shift"}
    assert view.configuration == stored


def test_upsert_forbidden_for_coordinator(coordinator_headers) -> None:
    async def scenario():
        async with _asgi_client(coordinator_headers) as http:
            await HttpConfigurationSource(http).upsert_configuration(VALID_CONFIGURATION)

    with pytest.raises(Forbidden):
        asyncio.run(scenario())


def test_controller_cycle_against_api(
    client, director_headers, professor_headers, professor_id, period_id
) -> None:
    client.put("/api/schedule-configuration/", json=VALID_CONFIGURATION, headers=director_headers)

    async def scenario():
        async with _asgi_client(director_headers) as admin_http, _asgi_client(professor_headers) as http:
            view = await HttpConfigurationSource(admin_http).get_configuration()
            controller = CellController(
                HttpAvailabilitySource(http),
                professor_id=professor_id,
                period_id=period_id,
                configuration=view.require(),
                notify=lambda _n: None,
            )
            await controller.refresh()
            slot = controller.slots(Shift.EVENING)[2]
            states = []
            for _ in range(3):
                cell = await controller.activate(Weekday.SATURDAY, slot)
                states.append(cell.state)
            return states, slot

    states, slot = asyncio.run(scenario())
    assert states == [CellState.AVAILABLE, CellState.UNAVAILABLE, CellState.EMPTY]
    assert slot == generate_slots(ScheduleConfig.from_values(VALID_CONFIGURATION), Shift.EVENING)[2]

    remaining = client.get(
        "/api/availability/",
        params={"professor_id": str(professor_id), "period_id": str(period_id)},
        headers=professor_headers,
    ).json()
    assert remaining == []


def test_store_rejection_becomes_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"detail": "CONFLICT"})

    async def scenario():
        async with _mock_client(handler) as http:
            await HttpAvailabilitySource(http).update_interval("abc", AvailabilityStatus.UNAVAILABLE)

    with pytest.raises(AvailabilitySourceError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.operation == "update"
    assert exc_info.value.status_code == 409
    assert "CONFLICT" in str(exc_info.value)


def test_network_failure_becomes_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with _mock_client(handler) as http:
            await HttpAvailabilitySource(http).create_interval(
                "p", "q", Weekday.MONDAY, 480, 530, AvailabilityStatus.AVAILABLE
            )

    with pytest.raises(AvailabilitySourceError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.operation == "create"
    assert exc_info.value.status_code is None


def test_create_payload_uses_wall_clock_labels() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            201,
            json={
                "id": "new",
                "weekday": "MONDAY",
                "start_time": "08:00:00",
                "end_time": "08:50:00",
                "status": "AVAILABLE",
            },
        )

    async def scenario():
        async with _mock_client(handler) as http:
            return await HttpAvailabilitySource(http).create_interval(
                "p", "q", Weekday.MONDAY, 480, 530, AvailabilityStatus.AVAILABLE
            )

    record = asyncio.run(scenario())
    [request] = seen
    assert request.method == "POST"
    body = request.read()
    assert b'"start_time":"08:00"' in body.replace(b" ", b"")
    assert b'"end_time":"08:50"' in body.replace(b" ", b"")
    assert (record.start, record.end) == (480, 530)
