from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_duration
from ..core.enums import ClockAction, DayStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's clock-in/clock-out for one day."""

    emp_id: str
    work_date: date
    clock_in: Optional[time]
    clock_out: Optional[time] = None
    work_duration_seconds: Optional[int] = None
    id: Optional[int] = None

    @property
    def hours(self) -> Decimal:
        if not self.work_duration_seconds:
            return Decimal("0")
        return Decimal(self.work_duration_seconds) / Decimal(3600)

    def to_dict(self) -> dict:
        return {
            "date": self.work_date,
            "clock_in": self.clock_in,
            "clock_out": self.clock_out,
            "work_duration": (
                format_duration(self.work_duration_seconds) if self.work_duration_seconds is not None else None
            ),
        }


@dataclass(frozen=True)
class ClockResult:
    action: ClockAction
    already: bool
    at: time
    message: str
    employee_name: str
    duration: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "success": True,
            "type": self.action.value,
            "already": self.already,
            "timestamp": self.at,
            "message": self.message,
            "employee_name": self.employee_name,
        }
        if self.duration is not None:
            out["work_duration"] = self.duration
        return out


@dataclass(frozen=True)
class AttendanceSummary:
    emp_id: str
    start: date
    end: date
    records: tuple[AttendanceRecord, ...]
    present_days: int
    half_days: int
    absent_days: int
    total_hours: Decimal

    def to_dict(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "start_date": self.start,
            "end_date": self.end,
            "records": [r.to_dict() for r in self.records],
            "summary": {
                "present_days": self.present_days,
                "half_days": self.half_days,
                "absent_days": self.absent_days,
                "total_hours": self.total_hours,
            },
        }


@dataclass(frozen=True)
class CalendarRow:
    emp_id: str
    name: str
    days: tuple[DayStatus, ...]

    def to_dict(self) -> dict:
        return {"emp_id": self.emp_id, "name": self.name, "days": [d.value for d in self.days]}
