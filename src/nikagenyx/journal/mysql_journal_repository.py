from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EntryStatus, EntryType
from ..database.audit import write_audit
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import JournalEntry, JournalEntryInput, JournalItem
from .repository import JournalRepository

_HEADER_COLUMNS = "id, entry_number, date, description, reference, status, amount, created_by, created_at"


def _row_to_entry(r: dict, items: Sequence[JournalItem] = ()) -> JournalEntry:
    return JournalEntry(
        id=int(r["id"]),
        entry_number=r["entry_number"],
        date=r["date"],
        status=EntryStatus(r["status"]),
        amount=to_decimal(r["amount"]),
        description=r.get("description") or "",
        reference=r.get("reference") or "",
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        items=tuple(items),
    )


def _row_to_item(r: dict) -> JournalItem:
    return JournalItem(
        id=int(r["id"]),
        account_id=int(r["account_id"]),
        account_code=r.get("account_code"),
        account_name=r.get("account_name"),
        description=r.get("description") or "",
        type=EntryType(r["type"]),
        amount=to_decimal(r["amount"]),
    )


def _insert_items(cur, entry_id: int, items: Sequence[JournalItem]) -> None:
    for item in items:
        cur.execute(
            """
            INSERT INTO journal_entry_items(journal_entry_id, account_id, description, type, amount)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (entry_id, item.account_id, item.description, item.type.value, item.amount),
        )


def insert_journal_entry(cur, data: JournalEntryInput, *, created_by: Optional[str]) -> int:
    """Insert header, items and the audit record through an open cursor.

    Shared with the invoice repository so an invoice and its posting land in
    the same transaction.
    """
    cur.execute(
        """
        INSERT INTO journal_entries(entry_number, date, description, reference, status, amount, created_by)
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            data.entry_number,
            data.date,
            data.description,
            data.reference,
            data.status.value,
            data.debit_total,
            created_by,
        ),
    )
    entry_id = int(cur.lastrowid)
    _insert_items(cur, entry_id, data.items)
    write_audit(
        cur,
        user_id=created_by,
        action="create",
        entity_type="journal_entry",
        entity_id=entry_id,
        changes={
            "entryNumber": data.entry_number,
            "date": data.date,
            "status": data.status.value,
            "amount": data.debit_total,
            "items": len(data.items),
        },
    )
    return entry_id


class MySQLJournalRepository(JournalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[JournalEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date <= %s")
            params.append(end)
        if status is not None:
            clauses.append("status = %s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_HEADER_COLUMNS} FROM journal_entries {where} ORDER BY date DESC, entry_number DESC",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_HEADER_COLUMNS} FROM journal_entries WHERE id=%s", (int(entry_id),))
            header = fetchone(cur)
            if not header:
                return None

            cur.execute(
                """
                SELECT jei.id, jei.account_id, a.code AS account_code, a.name AS account_name,
                       jei.description, jei.type, jei.amount
                FROM journal_entry_items jei
                JOIN accounts a ON a.id = jei.account_id
                WHERE jei.journal_entry_id=%s
                ORDER BY jei.type DESC, jei.id ASC
                """,
                (int(entry_id),),
            )
            items = [_row_to_item(r) for r in fetchall(cur)]
            return _row_to_entry(header, items)

    def get_by_number(self, entry_number: str) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_HEADER_COLUMNS} FROM journal_entries WHERE entry_number=%s", (entry_number,))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def create(self, data: JournalEntryInput, *, created_by: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_journal_entry(cur, data, created_by=created_by)

    def replace(self, entry_id: int, data: JournalEntryInput, *, updated_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE journal_entries
                SET entry_number=%s, date=%s, description=%s, reference=%s, status=%s, amount=%s, updated_by=%s
                WHERE id=%s
                """,
                (
                    data.entry_number,
                    data.date,
                    data.description,
                    data.reference,
                    data.status.value,
                    data.debit_total,
                    updated_by,
                    int(entry_id),
                ),
            )
            cur.execute("DELETE FROM journal_entry_items WHERE journal_entry_id=%s", (int(entry_id),))
            _insert_items(cur, int(entry_id), data.items)
            write_audit(
                cur,
                user_id=updated_by,
                action="update",
                entity_type="journal_entry",
                entity_id=entry_id,
                changes={"status": data.status.value, "amount": data.debit_total, "items": len(data.items)},
            )

    def set_status(self, entry_id: int, status: EntryStatus, *, updated_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE journal_entries SET status=%s, updated_by=%s WHERE id=%s",
                (status.value, updated_by, int(entry_id)),
            )
            write_audit(
                cur,
                user_id=updated_by,
                action=status.value,
                entity_type="journal_entry",
                entity_id=entry_id,
            )

    def delete(self, entry_id: int, *, deleted_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            # items go with the header (ON DELETE CASCADE)
            cur.execute("DELETE FROM journal_entries WHERE id=%s", (int(entry_id),))
            write_audit(
                cur,
                user_id=deleted_by,
                action="delete",
                entity_type="journal_entry",
                entity_id=entry_id,
            )
