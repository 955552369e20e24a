from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..settings.service import AttendanceRules
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.overtime_strategy import OvertimeStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, rules: AttendanceRules) -> AttendanceStrategy:
        start = datetime.combine(now.date(), rules.work_start)
        if now > start + timedelta(minutes=rules.late_threshold_minutes):
            return LateStrategy()
        return PresentStrategy()

    def for_clock_out(self, *, hours_worked: float, rules: AttendanceRules) -> AttendanceStrategy:
        if hours_worked > rules.overtime_threshold_hours:
            return OvertimeStrategy()
        return PresentStrategy()
