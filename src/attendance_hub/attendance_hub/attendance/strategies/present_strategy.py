from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.service import AttendanceRules
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """On-time clock-in; clock-out keeps whatever status the day already has."""

    def decide_clock_in(self, *, now: datetime, rules: AttendanceRules) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(
        self,
        *,
        now: datetime,
        hours_worked: float,
        rules: AttendanceRules,
        current: AttendanceStatus,
    ) -> StatusDecision:
        return StatusDecision(status=current)
