from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.constants import DEFAULT_SCHEDULE_LOCATION, SCHEDULE_APPLIES_TO_ALL
from ..core.enums import DayOfWeek


@dataclass(frozen=True)
class NewScheduleEntry:
    """Validated input for a weekly schedule row."""

    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    subject: Optional[str] = None
    description: Optional[str] = None
    location: str = DEFAULT_SCHEDULE_LOCATION
    applies_to: str = SCHEDULE_APPLIES_TO_ALL
    is_active: bool = True


@dataclass(frozen=True)
class ScheduleEntry:
    entry_id: int
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    subject: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = DEFAULT_SCHEDULE_LOCATION
    applies_to: str = SCHEDULE_APPLIES_TO_ALL
    is_active: bool = True
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None

    def sort_key(self) -> tuple:
        return (self.day_of_week.order, self.start_time)

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "day_of_week": self.day_of_week.value,
            "start_time": format_hhmm(self.start_time),
            "end_time": format_hhmm(self.end_time),
            "subject": self.subject,
            "description": self.description,
            "location": self.location,
            "applies_to": self.applies_to,
            "is_active": self.is_active,
            "created_by": self.created_by,
            "created_by_name": self.created_by_name,
        }
