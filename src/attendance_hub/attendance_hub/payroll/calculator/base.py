from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PayslipEstimate:
    total_hours: float
    hourly_rate: float
    gross_pay: float
    deductions: float
    net_pay: float

    def to_dict(self) -> dict:
        return {
            "totalHours": round(self.total_hours, 2),
            "hourlyRate": self.hourly_rate,
            "grossPay": round(self.gross_pay, 2),
            "deductions": round(self.deductions, 2),
            "netPay": round(self.net_pay, 2),
        }


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def estimate(self, total_hours: float) -> PayslipEstimate:
        raise NotImplementedError
