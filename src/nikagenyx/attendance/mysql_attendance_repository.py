from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _row_to_record(row: dict) -> AttendanceRecord:
    duration = row.get("work_duration_seconds")
    return AttendanceRecord(
        id=int(row["id"]),
        emp_id=row["emp_id"],
        work_date=row["date"],
        clock_in=normalize_mysql_time(row.get("clock_in")),
        clock_out=normalize_mysql_time(row.get("clock_out")),
        work_duration_seconds=int(duration) if duration is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, emp_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, emp_id, date, clock_in, clock_out, work_duration_seconds
                FROM attendance
                WHERE emp_id=%s AND date=%s
                """,
                (emp_id, work_date),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def create_clock_in(self, *, emp_id: str, work_date: date, clock_in: time) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            # a row may exist without clock_in (e.g. imported data)
            cur.execute(
                """
                INSERT INTO attendance(emp_id, date, clock_in)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE clock_in=COALESCE(clock_in, VALUES(clock_in))
                """,
                (emp_id, work_date, clock_in),
            )

    def update_clock_out(self, *, emp_id: str, work_date: date, clock_out: time, duration_seconds: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, work_duration_seconds=%s
                WHERE emp_id=%s AND date=%s
                """,
                (clock_out, int(duration_seconds), emp_id, work_date),
            )

    def list_range(self, *, start: date, end: date, emp_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        sql = """
            SELECT id, emp_id, date, clock_in, clock_out, work_duration_seconds
            FROM attendance
            WHERE date BETWEEN %s AND %s
        """
        params: list[object] = [start, end]
        if emp_id is not None:
            sql += " AND emp_id=%s"
            params.append(emp_id)
        sql += " ORDER BY emp_id, date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]
