from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from ...core.constants import DEFAULT_OVERTIME_MULTIPLIER, STANDARD_HOURS_PER_DAY
from ...core.enums import DayStatus, PayrollMode
from ...employees.model import Employee
from ..model import PayrollResult, WorkDay

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def overtime_hours(days: Sequence[WorkDay]) -> Decimal:
    """Hours beyond the standard day, counted on present days only."""
    standard = Decimal(STANDARD_HOURS_PER_DAY)
    return sum(
        (d.hours - standard for d in days if d.status == DayStatus.PRESENT and d.hours > standard),
        Decimal("0"),
    )


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    mode: PayrollMode

    def __init__(self, *, overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER):
        self._overtime_multiplier = Decimal(overtime_multiplier)

    def overtime_pay(self, day_rate: Decimal, hours: Decimal) -> Decimal:
        return day_rate / Decimal(STANDARD_HOURS_PER_DAY) * self._overtime_multiplier * hours

    @abstractmethod
    def calculate(self, employee: Employee, days: Sequence[WorkDay]) -> PayrollResult:
        """`days` holds one entry per calendar day of the period."""

        raise NotImplementedError
