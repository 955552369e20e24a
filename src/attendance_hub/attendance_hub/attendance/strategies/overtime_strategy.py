from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...settings.service import AttendanceRules
from .base import AttendanceStrategy, StatusDecision


class OvertimeStrategy(AttendanceStrategy):
    """Worked longer than the overtime threshold."""

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
        extra = round(hours_worked - rules.overtime_threshold_hours, 2)
        return StatusDecision(status=AttendanceStatus.OVERTIME, note=f"{extra}h overtime")
