from __future__ import annotations

from typing import Optional

from ..core.enums import PayrollMode
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import PayrollModeRepository

_SETTINGS_ROW_ID = 1


class MySQLPayrollModeRepository(PayrollModeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_mode(self) -> Optional[PayrollMode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT mode FROM payroll_mode WHERE id=%s", (_SETTINGS_ROW_ID,))
            row = fetchone(cur)
            return PayrollMode(row["mode"]) if row else None

    def set_mode(self, mode: PayrollMode) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_mode(id, mode) VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE mode=VALUES(mode)
                """,
                (_SETTINGS_ROW_ID, mode.value),
            )
