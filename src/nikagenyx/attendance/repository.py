from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, emp_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(self, *, emp_id: str, work_date: date, clock_in: time) -> None:
        raise NotImplementedError

    def update_clock_out(self, *, emp_id: str, work_date: date, clock_out: time, duration_seconds: int) -> None:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, emp_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        """Records with start <= work_date <= end, ordered by (emp_id, work_date)."""

        raise NotImplementedError
