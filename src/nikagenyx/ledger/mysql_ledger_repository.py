from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AccountType, EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_decimal
from .model import PostedLine
from .repository import LedgerRepository


def _contra(column: str) -> str:
    return f"""
        (SELECT ca.{column}
         FROM journal_entry_items cj
         JOIN accounts ca ON ca.id = cj.account_id
         WHERE cj.journal_entry_id = je.id AND cj.account_id <> jei.account_id
         ORDER BY cj.id
         LIMIT 1)
    """


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def posted_lines(
        self,
        *,
        start: date,
        end: date,
        account_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
    ) -> Sequence[PostedLine]:
        clauses = ["je.status = 'posted'", "je.date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if account_id is not None:
            clauses.append("jei.account_id = %s")
            params.append(int(account_id))
        if account_type is not None:
            clauses.append("a.type = %s")
            params.append(account_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    jei.id,
                    je.id AS journal_entry_id,
                    je.entry_number,
                    je.date,
                    je.description,
                    je.reference,
                    jei.account_id,
                    jei.type,
                    jei.amount,
                    {_contra("code")} AS contra_account_code,
                    {_contra("name")} AS contra_account_name
                FROM journal_entry_items jei
                JOIN journal_entries je ON je.id = jei.journal_entry_id
                JOIN accounts a ON a.id = jei.account_id
                WHERE {" AND ".join(clauses)}
                ORDER BY je.date, je.entry_number, jei.id
                """,
                tuple(params),
            )
            return [
                PostedLine(
                    id=int(r["id"]),
                    journal_entry_id=int(r["journal_entry_id"]),
                    entry_number=r["entry_number"],
                    date=r["date"],
                    account_id=int(r["account_id"]),
                    type=EntryType(r["type"]),
                    amount=to_decimal(r["amount"]),
                    description=r.get("description") or "",
                    reference=r.get("reference") or "",
                    contra_account_code=r.get("contra_account_code"),
                    contra_account_name=r.get("contra_account_name"),
                )
                for r in fetchall(cur)
            ]
