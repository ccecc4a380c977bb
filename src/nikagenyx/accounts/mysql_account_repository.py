from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import AccountType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Account, AccountInput, PostedTotals
from .repository import AccountRepository

_COLUMNS = "id, code, name, description, type, subtype, is_active, parent_id, tax_rate, opening_balance"


def _row_to_account(r: dict) -> Account:
    return Account(
        id=int(r["id"]),
        code=r["code"],
        name=r["name"],
        type=AccountType(r["type"]),
        description=r.get("description") or "",
        subtype=r.get("subtype"),
        is_active=bool(r.get("is_active", True)),
        parent_id=r.get("parent_id"),
        tax_rate=to_decimal(r.get("tax_rate")),
        opening_balance=to_decimal(r.get("opening_balance")),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts ORDER BY code ASC")
            return [_row_to_account(r) for r in fetchall(cur)]

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE id=%s", (int(account_id),))
            r = fetchone(cur)
            return _row_to_account(r) if r else None

    def get_by_code(self, code: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE code=%s", (code,))
            r = fetchone(cur)
            return _row_to_account(r) if r else None

    def create(self, data: AccountInput, *, created_by: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(code, name, description, type, subtype, is_active,
                                     parent_id, tax_rate, opening_balance, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.code,
                    data.name,
                    data.description,
                    data.type.value,
                    data.subtype,
                    int(data.is_active),
                    data.parent_id,
                    data.tax_rate,
                    data.opening_balance,
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def update(self, account_id: int, data: AccountInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE accounts
                SET code=%s, name=%s, description=%s, type=%s, subtype=%s, is_active=%s,
                    parent_id=%s, tax_rate=%s, opening_balance=%s
                WHERE id=%s
                """,
                (
                    data.code,
                    data.name,
                    data.description,
                    data.type.value,
                    data.subtype,
                    int(data.is_active),
                    data.parent_id,
                    data.tax_rate,
                    data.opening_balance,
                    int(account_id),
                ),
            )
            # rowcount is 0 when nothing changed, so check existence separately.
            cur.execute("SELECT 1 FROM accounts WHERE id=%s", (int(account_id),))
            return fetchone(cur) is not None

    def delete(self, account_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE id=%s", (int(account_id),))
            return cur.rowcount > 0

    def count_children(self, account_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM accounts WHERE parent_id=%s", (int(account_id),))
            return int(fetchone(cur)["n"])

    def count_journal_lines(self, account_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM journal_entry_items WHERE account_id=%s", (int(account_id),))
            return int(fetchone(cur)["n"])

    def posted_totals(
        self,
        *,
        before: Optional[date] = None,
        on_or_before: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> Mapping[int, PostedTotals]:
        clauses = ["je.status = 'posted'"]
        params: list[object] = []
        if before is not None:
            clauses.append("je.date < %s")
            params.append(before)
        if on_or_before is not None:
            clauses.append("je.date <= %s")
            params.append(on_or_before)
        if account_id is not None:
            clauses.append("jei.account_id = %s")
            params.append(int(account_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    jei.account_id,
                    COALESCE(SUM(CASE WHEN jei.type = 'debit' THEN jei.amount END), 0) AS debit_total,
                    COALESCE(SUM(CASE WHEN jei.type = 'credit' THEN jei.amount END), 0) AS credit_total
                FROM journal_entry_items jei
                JOIN journal_entries je ON je.id = jei.journal_entry_id
                WHERE {where}
                GROUP BY jei.account_id
                """,
                tuple(params),
            )
            return {
                int(r["account_id"]): PostedTotals(
                    account_id=int(r["account_id"]),
                    debit_total=to_decimal(r["debit_total"]),
                    credit_total=to_decimal(r["credit_total"]),
                )
                for r in fetchall(cur)
            }
