from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.enums import DayStatus, PayrollMode


@dataclass(frozen=True)
class WorkDay:
    """Read-model for payroll: a calendar day of the period with its attendance code."""

    day: date
    status: DayStatus
    hours: Decimal = Decimal("0")


@dataclass(frozen=True)
class PayrollResult:
    emp_id: str
    name: str
    mode: PayrollMode
    days_present: int
    days_half: int
    days_absent: int
    base_pay: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    deductions: Decimal
    total_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "name": self.name,
            "mode": self.mode.value,
            "days_present": self.days_present,
            "days_half": self.days_half,
            "days_absent": self.days_absent,
            "base_pay": self.base_pay,
            "overtime_hours": self.overtime_hours,
            "overtime_pay": self.overtime_pay,
            "deductions": self.deductions,
            "total_pay": self.total_pay,
        }
