from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import PAY_COLUMNS, PROFILE_COLUMNS, Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    emp_id, name, role, department, phone, dob, email, address, pin_hash, mfa_secret,
    failed_mfa_attempts, failed_pin_attempts, reset_pin_ready, is_active, daily_rate, monthly_salary
"""


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        emp_id=row["emp_id"],
        name=row["name"],
        role=Role(row["role"]),
        pin_hash=row["pin_hash"],
        department=row.get("department"),
        phone=row.get("phone"),
        dob=row.get("dob"),
        email=row.get("email"),
        address=row.get("address"),
        mfa_secret=row.get("mfa_secret"),
        failed_mfa_attempts=int(row.get("failed_mfa_attempts") or 0),
        failed_pin_attempts=int(row.get("failed_pin_attempts") or 0),
        reset_pin_ready=bool(row.get("reset_pin_ready")),
        is_active=bool(row.get("is_active", True)),
        daily_rate=to_decimal(row.get("daily_rate")),
        monthly_salary=to_decimal(row.get("monthly_salary")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, emp_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE emp_id=%s", (emp_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY emp_id")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_by_ids(self, emp_ids: Sequence[str]) -> Sequence[Employee]:
        if not emp_ids:
            return []
        placeholders = ",".join(["%s"] * len(emp_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE emp_id IN ({placeholders}) ORDER BY emp_id",
                tuple(emp_ids),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def find_by_phone(self, phone: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE phone=%s", (phone,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def find_by_name_and_dob(self, name: str, dob: date) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE name=%s AND dob=%s", (name, dob))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def create(self, data: NewEmployee) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(emp_id, name, role, department, phone, dob, email, address, pin_hash, mfa_secret)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.emp_id,
                    data.name,
                    data.role.value,
                    data.department,
                    data.phone,
                    data.dob,
                    data.email,
                    data.address,
                    data.pin_hash,
                    data.mfa_secret,
                ),
            )

    def update_profile(self, emp_id: str, fields: Mapping[str, object]) -> None:
        columns = [c for c in PROFILE_COLUMNS + PAY_COLUMNS if c in fields]
        if not columns:
            return
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE emp_id=%s",
                tuple(fields[c] for c in columns) + (emp_id,),
            )

    def set_role(self, emp_id: str, role: Role) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET role=%s WHERE emp_id=%s", (role.value, emp_id))

    def delete(self, emp_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE emp_id=%s", (emp_id,))
            return cur.rowcount > 0

    def set_failed_pin_attempts(self, emp_id: str, attempts: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET failed_pin_attempts=%s WHERE emp_id=%s", (int(attempts), emp_id))

    def set_failed_mfa_attempts(self, emp_id: str, attempts: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET failed_mfa_attempts=%s WHERE emp_id=%s", (int(attempts), emp_id))

    def set_mfa_secret(self, emp_id: str, secret: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET mfa_secret=%s, failed_mfa_attempts=0 WHERE emp_id=%s",
                (secret, emp_id),
            )

    def set_reset_pin_ready(self, emp_id: str, ready: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET reset_pin_ready=%s WHERE emp_id=%s", (int(ready), emp_id))

    def set_pin(self, emp_id: str, pin_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET pin_hash=%s, failed_pin_attempts=0, reset_pin_ready=0
                WHERE emp_id=%s
                """,
                (pin_hash, emp_id),
            )
