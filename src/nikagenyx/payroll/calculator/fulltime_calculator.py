from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...core.enums import DayStatus, PayrollMode
from ...employees.model import Employee
from ..model import PayrollResult, WorkDay
from .base import PayrollCalculator, money, overtime_hours


def _is_weekday(day: WorkDay) -> bool:
    return day.day.weekday() < 5


class FulltimePayrollCalculator(PayrollCalculator):
    """Monthly salary spread over the weekdays of the period.

    Each absent weekday deducts a day's rate and each half weekday deducts
    half of it. A weekday with no record counts as absent. Weekend days never
    deduct; weekend work still earns overtime.
    """

    mode = PayrollMode.FULLTIME

    def calculate(self, employee: Employee, days: Sequence[WorkDay]) -> PayrollResult:
        salary = employee.monthly_salary
        weekdays = [d for d in days if _is_weekday(d)]
        rate = salary / len(weekdays) if weekdays else Decimal("0")

        present = sum(1 for d in days if d.status == DayStatus.PRESENT)
        half = sum(1 for d in weekdays if d.status == DayStatus.HALF_DAY)
        absent = sum(1 for d in weekdays if d.status in (DayStatus.ABSENT, DayStatus.NO_RECORD))

        deductions = rate * absent + rate / 2 * half
        ot_hours = overtime_hours(days)
        ot_pay = self.overtime_pay(rate, ot_hours)
        total = max(salary - deductions, Decimal("0")) + ot_pay

        return PayrollResult(
            emp_id=employee.emp_id,
            name=employee.name,
            mode=self.mode,
            days_present=present,
            days_half=half,
            days_absent=absent,
            base_pay=money(salary),
            overtime_hours=money(ot_hours),
            overtime_pay=money(ot_pay),
            deductions=money(deductions),
            total_pay=money(total),
        )
