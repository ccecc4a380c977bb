from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Mapping, Optional

from ..core.enums import DayStatus
from .model import AttendanceRecord


def _parse_clock(value) -> time:
    if isinstance(value, time):
        return value
    return datetime.strptime(str(value), "%H:%M:%S").time()


@dataclass(frozen=True)
class AttendanceRules:
    """Working-hours window and the hour thresholds behind P / L / A."""

    work_start: time = time(9, 0, 0)
    work_end: time = time(18, 0, 0)
    enforce_working_hours: bool = False
    present_hours: float = 7
    half_day_hours: float = 5

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, object]]) -> "AttendanceRules":
        config = config or {}
        defaults = cls()
        return cls(
            work_start=_parse_clock(config.get("work_start", defaults.work_start)),
            work_end=_parse_clock(config.get("work_end", defaults.work_end)),
            enforce_working_hours=bool(config.get("enforce_working_hours", defaults.enforce_working_hours)),
            present_hours=float(config.get("present_hours", defaults.present_hours)),
            half_day_hours=float(config.get("half_day_hours", defaults.half_day_hours)),
        )

    def within_working_hours(self, at: time) -> bool:
        if not self.enforce_working_hours:
            return True
        return self.work_start <= at.replace(microsecond=0) <= self.work_end

    def day_status_for_seconds(self, seconds: int) -> DayStatus:
        hours = seconds / 3600
        if hours >= self.present_hours:
            return DayStatus.PRESENT
        if hours >= self.half_day_hours:
            return DayStatus.HALF_DAY
        return DayStatus.ABSENT

    def day_status(self, record: Optional[AttendanceRecord]) -> DayStatus:
        if record is None or record.clock_in is None or record.clock_out is None:
            return DayStatus.NO_RECORD
        return self.day_status_for_seconds(record.work_duration_seconds or 0)
