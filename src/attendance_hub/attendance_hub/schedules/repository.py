from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import DayOfWeek
from .model import NewScheduleEntry, ScheduleEntry


class ScheduleRepository(Protocol):
    def list_entries(
        self,
        *,
        active_only: bool = False,
        audiences: Optional[Sequence[str]] = None,
        day: Optional[DayOfWeek] = None,
    ) -> Sequence[ScheduleEntry]:
        """Ordered by weekday (Monday first) then start time."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def create(self, entry: NewScheduleEntry, *, created_by: int) -> int:
        raise NotImplementedError

    def update_fields(self, entry_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError

    def replace_all(self, entries: Sequence[NewScheduleEntry], *, created_by: int) -> None:
        """Delete every entry and insert `entries` in one transaction."""

        raise NotImplementedError
