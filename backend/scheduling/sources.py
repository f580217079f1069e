from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from scheduling.constants import AvailabilityStatus, Weekday
from scheduling.errors import Forbidden, NotConfigured
from scheduling.reconcile import AvailabilityRecord
from scheduling.slots import ScheduleConfig


@dataclass(frozen=True)
class ConfigurationView:
    """What a caller may see of the schedule configuration.

    ``configuration`` is None both when nothing is configured yet and when the
    caller lacks permission; ``has_permission`` tells the two apart.
    """

    configuration: ScheduleConfig | None
    has_permission: bool = True

    @property
    def is_configured(self) -> bool:
        return self.configuration is not None

    def require(self) -> ScheduleConfig:
        if not self.has_permission:
            raise Forbidden("not allowed to read the schedule configuration")
        if self.configuration is None:
            raise NotConfigured("no schedule configuration has been saved yet")
        return self.configuration


class ConfigurationSource(Protocol):
    async def get_configuration(self) -> ConfigurationView: ...

    async def upsert_configuration(self, values: dict[str, Any]) -> ScheduleConfig: ...


class AvailabilitySource(Protocol):
    async def list_intervals(self, professor_id: Any, period_id: Any) -> list[AvailabilityRecord]: ...

    async def create_interval(
        self,
        professor_id: Any,
        period_id: Any,
        weekday: Weekday,
        start: int,
        end: int,
        status: AvailabilityStatus,
    ) -> AvailabilityRecord: ...

    async def update_interval(self, interval_id: Any, status: AvailabilityStatus) -> AvailabilityRecord: ...

    async def delete_interval(self, interval_id: Any) -> None: ...
