from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.service import AttendanceRules
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def decide_clock_in(self, *, now: datetime, rules: AttendanceRules) -> StatusDecision:
        start = datetime.combine(now.date(), rules.work_start)
        minutes_late = int((now - start).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"{minutes_late} minutes late")

    def decide_clock_out(
        self,
        *,
        now: datetime,
        hours_worked: float,
        rules: AttendanceRules,
        current: AttendanceStatus,
    ) -> StatusDecision:
        return StatusDecision(status=current)
