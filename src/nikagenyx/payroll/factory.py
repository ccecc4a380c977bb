from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER
from ..core.enums import PayrollMode
from .calculator.base import PayrollCalculator
from .calculator.freelance_calculator import FreelancePayrollCalculator
from .calculator.fulltime_calculator import FulltimePayrollCalculator


@dataclass
class PayrollCalculatorFactory:
    """Factory Pattern: choose the calculator for the configured payroll mode."""

    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER

    def for_mode(self, mode: PayrollMode) -> PayrollCalculator:
        if mode == PayrollMode.FULLTIME:
            return FulltimePayrollCalculator(overtime_multiplier=self.overtime_multiplier)
        return FreelancePayrollCalculator(overtime_multiplier=self.overtime_multiplier)
