from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...core.enums import DayStatus, PayrollMode
from ...employees.model import Employee
from ..model import PayrollResult, WorkDay
from .base import PayrollCalculator, money, overtime_hours


class FreelancePayrollCalculator(PayrollCalculator):
    """Daily rate: P pays a full day, L half a day, A nothing. Days without a record are ignored."""

    mode = PayrollMode.FREELANCE

    def calculate(self, employee: Employee, days: Sequence[WorkDay]) -> PayrollResult:
        rate = employee.daily_rate
        present = sum(1 for d in days if d.status == DayStatus.PRESENT)
        half = sum(1 for d in days if d.status == DayStatus.HALF_DAY)
        absent = sum(1 for d in days if d.status == DayStatus.ABSENT)

        base = rate * present + rate / 2 * half
        ot_hours = overtime_hours(days)
        ot_pay = self.overtime_pay(rate, ot_hours)

        return PayrollResult(
            emp_id=employee.emp_id,
            name=employee.name,
            mode=self.mode,
            days_present=present,
            days_half=half,
            days_absent=absent,
            base_pay=money(base),
            overtime_hours=money(ot_hours),
            overtime_pay=money(ot_pay),
            deductions=Decimal("0.00"),
            total_pay=money(base + ot_pay),
        )
