from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, start_of_month
from .calculator.base import PayrollCalculator, PayslipEstimate
from .calculator.standard_calculator import StandardPayrollCalculator


class PayslipService:
    """Month-to-date pay estimate from recorded hours."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()

    def estimate_current_month(self, user_id: int, *, now: datetime | None = None) -> PayslipEstimate:
        now = now or now_local()
        records = self._attendance.list_for_user(int(user_id), since=start_of_month(now))
        total_hours = sum(float(r.hours_worked or 0) for r in records)
        return self._calculator.estimate(total_hours)
