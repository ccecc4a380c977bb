from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import InvoiceStatus, InvoiceType
from ..journal.model import JournalEntryInput
from .model import Invoice, InvoiceInput


class InvoiceRepository(Protocol):
    def list_invoices(
        self,
        *,
        invoice_type: Optional[InvoiceType] = None,
        status: Optional[InvoiceStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Invoice]:
        raise NotImplementedError

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        raise NotImplementedError

    def create(
        self,
        data: InvoiceInput,
        *,
        created_by: Optional[str],
        journal: Optional[JournalEntryInput] = None,
    ) -> tuple[int, Optional[int]]:
        """Store the invoice (and its journal entry, when given) in one transaction.

        Returns (invoice_id, journal_entry_id).
        """

        raise NotImplementedError

    def set_status(self, invoice_id: int, status: InvoiceStatus, *, updated_by: Optional[str]) -> None:
        raise NotImplementedError

    def delete(self, invoice_id: int, *, deleted_by: Optional[str]) -> None:
        raise NotImplementedError
