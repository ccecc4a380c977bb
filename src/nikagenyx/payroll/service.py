from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.rules import AttendanceRules
from ..common.datetime_utils import iter_days, month_bounds
from ..common.validators import require_enum
from ..core.enums import PayrollMode
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .factory import PayrollCalculatorFactory
from .model import PayrollResult, WorkDay
from .repository import PayrollModeRepository

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = Decimal(3600)


class PayrollService:
    def __init__(
        self,
        modes: PayrollModeRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        rules: Optional[AttendanceRules] = None,
        calculator_factory: Optional[PayrollCalculatorFactory] = None,
    ):
        self._modes = modes
        self._attendance = attendance
        self._employees = employees
        self._rules = rules or AttendanceRules()
        self._factory = calculator_factory or PayrollCalculatorFactory()

    def get_mode(self) -> PayrollMode:
        return self._modes.get_mode() or PayrollMode.FREELANCE

    def set_mode(self, mode: Any) -> PayrollMode:
        if not mode:
            raise ValidationError("Payroll mode is required")
        mode = require_enum(mode, PayrollMode, "payroll mode")
        self._modes.set_mode(mode)
        logger.info(f"Payroll mode set to {mode.value}")
        return mode

    def run_payroll(self, year: Any, month: Any) -> list[PayrollResult]:
        try:
            year, month = int(year), int(month)
            start, end = month_bounds(year, month)
        except (TypeError, ValueError):
            raise ValidationError("Valid year and month are required")

        mode = self.get_mode()
        calculator = self._factory.for_mode(mode)

        by_employee: dict[str, dict] = {}
        for r in self._attendance.list_range(start=start, end=end):
            by_employee.setdefault(r.emp_id, {})[r.work_date] = r

        results = []
        for employee in self._employees.list_all(active_only=True):
            records = by_employee.get(employee.emp_id, {})
            days = []
            for d in iter_days(start, end):
                record = records.get(d)
                seconds = record.work_duration_seconds if record else None
                days.append(
                    WorkDay(
                        day=d,
                        status=self._rules.day_status(record),
                        hours=Decimal(seconds or 0) / _SECONDS_PER_HOUR,
                    )
                )
            results.append(calculator.calculate(employee, days))

        logger.info(f"Payroll {year}-{month:02d} computed for {len(results)} employees ({mode.value})")
        return results
