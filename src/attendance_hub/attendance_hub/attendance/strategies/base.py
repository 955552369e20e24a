from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...settings.service import AttendanceRules


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, rules: AttendanceRules) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(
        self,
        *,
        now: datetime,
        hours_worked: float,
        rules: AttendanceRules,
        current: AttendanceStatus,
    ) -> StatusDecision:
        raise NotImplementedError
