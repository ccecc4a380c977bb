from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import InvoiceStatus, InvoiceType
from ..database.audit import write_audit
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from ..journal.model import JournalEntryInput
from ..journal.mysql_journal_repository import insert_journal_entry
from .model import Invoice, InvoiceInput, InvoiceItem, Party
from .repository import InvoiceRepository

_COLUMNS = """
    id, invoice_number, invoice_type, status, date, due_date,
    party_name, party_gstin, party_address, party_email, party_phone,
    subtotal, tax_total, total, notes, terms, journal_entry_id, created_by, created_at
"""


def _row_to_invoice(r: dict, items: Sequence[InvoiceItem] = ()) -> Invoice:
    return Invoice(
        id=int(r["id"]),
        invoice_number=r["invoice_number"],
        invoice_type=InvoiceType(r["invoice_type"]),
        status=InvoiceStatus(r["status"]),
        date=r["date"],
        due_date=r["due_date"],
        party=Party(
            name=r["party_name"],
            gstin=r.get("party_gstin"),
            address=r.get("party_address"),
            email=r.get("party_email"),
            phone=r.get("party_phone"),
        ),
        subtotal=to_decimal(r["subtotal"]),
        tax_total=to_decimal(r["tax_total"]),
        total=to_decimal(r["total"]),
        notes=r.get("notes"),
        terms=r.get("terms"),
        journal_entry_id=r.get("journal_entry_id"),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        items=tuple(items),
    )


def _row_to_item(r: dict) -> InvoiceItem:
    return InvoiceItem(
        id=int(r["id"]),
        description=r["description"],
        quantity=to_decimal(r["quantity"]),
        unit_price=to_decimal(r["unit_price"]),
        discount_percent=to_decimal(r["discount_percent"]),
        tax_rate=to_decimal(r["tax_rate"]),
        account_id=r.get("account_id"),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_invoices(
        self,
        *,
        invoice_type: Optional[InvoiceType] = None,
        status: Optional[InvoiceStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Invoice]:
        clauses: list[str] = []
        params: list[object] = []
        if invoice_type is not None:
            clauses.append("invoice_type = %s")
            params.append(invoice_type.value)
        if status is not None:
            clauses.append("status = %s")
            params.append(status.value)
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM invoices {where} ORDER BY date DESC, invoice_number DESC",
                tuple(params),
            )
            return [_row_to_invoice(r) for r in fetchall(cur)]

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices WHERE id=%s", (int(invoice_id),))
            header = fetchone(cur)
            if not header:
                return None
            cur.execute(
                """
                SELECT id, description, quantity, unit_price, discount_percent, tax_rate, account_id
                FROM invoice_items WHERE invoice_id=%s ORDER BY id
                """,
                (int(invoice_id),),
            )
            return _row_to_invoice(header, [_row_to_item(r) for r in fetchall(cur)])

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices WHERE invoice_number=%s", (invoice_number,))
            r = fetchone(cur)
            return _row_to_invoice(r) if r else None

    def create(
        self,
        data: InvoiceInput,
        *,
        created_by: Optional[str],
        journal: Optional[JournalEntryInput] = None,
    ) -> tuple[int, Optional[int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            journal_entry_id = insert_journal_entry(cur, journal, created_by=created_by) if journal else None

            cur.execute(
                """
                INSERT INTO invoices(invoice_number, invoice_type, status, date, due_date,
                                     party_name, party_gstin, party_address, party_email, party_phone,
                                     subtotal, tax_total, total, notes, terms, journal_entry_id, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.invoice_number,
                    data.invoice_type.value,
                    data.status.value,
                    data.date,
                    data.due_date,
                    data.party.name,
                    data.party.gstin,
                    data.party.address,
                    data.party.email,
                    data.party.phone,
                    data.subtotal,
                    data.tax_total,
                    data.total,
                    data.notes,
                    data.terms,
                    journal_entry_id,
                    created_by,
                ),
            )
            invoice_id = int(cur.lastrowid)

            for item in data.items:
                cur.execute(
                    """
                    INSERT INTO invoice_items(invoice_id, description, quantity, unit_price, discount_percent,
                                              tax_rate, tax_amount, amount, account_id)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        invoice_id,
                        item.description,
                        item.quantity,
                        item.unit_price,
                        item.discount_percent,
                        item.tax_rate,
                        item.tax_amount,
                        item.amount,
                        item.account_id,
                    ),
                )

            write_audit(
                cur,
                user_id=created_by,
                action="create",
                entity_type="invoice",
                entity_id=invoice_id,
                changes={
                    "invoiceNumber": data.invoice_number,
                    "invoiceType": data.invoice_type.value,
                    "status": data.status.value,
                    "total": data.total,
                    "journalEntryId": journal_entry_id,
                },
            )
            return invoice_id, journal_entry_id

    def set_status(self, invoice_id: int, status: InvoiceStatus, *, updated_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE invoices SET status=%s WHERE id=%s", (status.value, int(invoice_id)))
            write_audit(
                cur,
                user_id=updated_by,
                action="status",
                entity_type="invoice",
                entity_id=invoice_id,
                changes={"status": status.value},
            )

    def delete(self, invoice_id: int, *, deleted_by: Optional[str]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoices WHERE id=%s", (int(invoice_id),))
            write_audit(cur, user_id=deleted_by, action="delete", entity_type="invoice", entity_id=invoice_id)
