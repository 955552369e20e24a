from __future__ import annotations

from .base import PayrollCalculator, PayslipEstimate
from ...core.constants import DEDUCTION_RATE, HOURLY_RATE


class StandardPayrollCalculator(PayrollCalculator):
    """Flat hourly rate with a single percentage deduction."""

    def __init__(self, *, hourly_rate: float = HOURLY_RATE, deduction_rate: float = DEDUCTION_RATE):
        self._hourly_rate = float(hourly_rate)
        self._deduction_rate = float(deduction_rate)

    def estimate(self, total_hours: float) -> PayslipEstimate:
        hours = max(float(total_hours or 0), 0.0)
        gross = hours * self._hourly_rate
        deductions = gross * self._deduction_rate
        return PayslipEstimate(
            total_hours=hours,
            hourly_rate=self._hourly_rate,
            gross_pay=gross,
            deductions=deductions,
            net_pay=gross - deductions,
        )
