from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import format_duration, iter_days, month_bounds, now_local, seconds_between
from ..common.validators import require_date_range
from ..core.enums import ClockAction, DayStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AttendanceSummary, CalendarRow, ClockResult
from .repository import AttendanceRepository
from .rules import AttendanceRules

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        rules: Optional[AttendanceRules] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._rules = rules or AttendanceRules()

    def clock(self, emp_id: str, action: Any, *, now: Optional[datetime] = None) -> ClockResult:
        if not emp_id or not action:
            raise ValidationError("Missing required parameters. Both 'emp_id' and 'type' are required.")
        try:
            action = ClockAction(action)
        except ValueError:
            raise ValidationError("Invalid action type. Must be 'in' or 'out'.")

        now = (now or now_local()).replace(microsecond=0)
        today = now.date()
        at = now.time()

        employee = self._employees.get_by_id(emp_id)
        if not employee:
            raise NotFoundError("Employee not found.")

        if not self._rules.within_working_hours(at):
            r = self._rules
            raise AuthorizationError(
                f"Attendance marking is only allowed between {r.work_start:%H:%M:%S} and {r.work_end:%H:%M:%S}."
            )

        record = self._attendance.get_for_employee_and_date(emp_id, today)

        if action == ClockAction.IN:
            if record and record.clock_in:
                return ClockResult(
                    action=action,
                    already=True,
                    at=record.clock_in,
                    message="Already clocked in for today.",
                    employee_name=employee.name,
                )
            self._attendance.create_clock_in(emp_id=emp_id, work_date=today, clock_in=at)
            logger.info(f"{emp_id} clocked in at {at}")
            return ClockResult(
                action=action,
                already=False,
                at=at,
                message="Clocked in successfully.",
                employee_name=employee.name,
            )

        if not record or not record.clock_in:
            raise ValidationError("You have not clocked in today.")
        if record.clock_out:
            return ClockResult(
                action=action,
                already=True,
                at=record.clock_out,
                message="Already clocked out for today.",
                employee_name=employee.name,
                duration=format_duration(record.work_duration_seconds or 0),
            )

        seconds = seconds_between(record.clock_in, at)
        self._attendance.update_clock_out(emp_id=emp_id, work_date=today, clock_out=at, duration_seconds=seconds)
        logger.info(f"{emp_id} clocked out at {at} after {format_duration(seconds)}")
        return ClockResult(
            action=action,
            already=False,
            at=at,
            message="Clocked out successfully.",
            employee_name=employee.name,
            duration=format_duration(seconds),
        )

    def clock_status(self, emp_id: str, today: Optional[date] = None) -> dict:
        if not emp_id:
            raise ValidationError("Missing employee ID")
        today = today or now_local().date()

        record = self._attendance.get_for_employee_and_date(emp_id, today)
        if record and record.clock_in and not record.clock_out:
            return {"last_action": ClockAction.IN.value, "message": "You are currently clocked in"}
        if record and record.clock_in and record.clock_out:
            return {"last_action": ClockAction.OUT.value, "message": "You have completed your shift today"}
        return {"last_action": ClockAction.OUT.value, "message": "Ready to clock in"}

    def day_status(self, seconds: Optional[int]) -> DayStatus:
        if seconds is None:
            return DayStatus.NO_RECORD
        return self._rules.day_status_for_seconds(seconds)

    def monthly_calendar(self, year: Any, month: Any) -> list[CalendarRow]:
        try:
            year, month = int(year), int(month)
            start, end = month_bounds(year, month)
        except (TypeError, ValueError):
            raise ValidationError("Valid year and month are required")

        records = {(r.emp_id, r.work_date): r for r in self._attendance.list_range(start=start, end=end)}
        days = list(iter_days(start, end))
        return [
            CalendarRow(
                emp_id=e.emp_id,
                name=e.name,
                days=tuple(self._rules.day_status(records.get((e.emp_id, d))) for d in days),
            )
            for e in self._employees.list_all()
        ]

    def employee_summary(self, emp_id: str, *, start: date, end: date) -> AttendanceSummary:
        require_date_range(start, end)
        if not self._employees.get_by_id(emp_id):
            raise NotFoundError("Employee not found")

        records = tuple(self._attendance.list_range(start=start, end=end, emp_id=emp_id))
        counts = {DayStatus.PRESENT: 0, DayStatus.HALF_DAY: 0, DayStatus.ABSENT: 0}
        total_seconds = 0
        for r in records:
            status = self._rules.day_status(r)
            if status in counts:
                counts[status] += 1
            total_seconds += r.work_duration_seconds or 0

        return AttendanceSummary(
            emp_id=emp_id,
            start=start,
            end=end,
            records=records,
            present_days=counts[DayStatus.PRESENT],
            half_days=counts[DayStatus.HALF_DAY],
            absent_days=counts[DayStatus.ABSENT],
            total_hours=(Decimal(total_seconds) / Decimal(3600)).quantize(Decimal("0.01")),
        )
