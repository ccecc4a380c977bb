from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import EntryStatus, EntryType


def _total(items: Sequence["JournalItem"], entry_type: EntryType) -> Decimal:
    return sum((i.amount for i in items if i.type == entry_type), Decimal("0.00"))


@dataclass(frozen=True)
class JournalItem:
    """One debit or credit line of a journal entry."""

    account_id: int
    type: EntryType
    amount: Decimal
    description: str = ""
    id: Optional[int] = None
    account_code: Optional[str] = None
    account_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "accountId": self.account_id,
            "accountCode": self.account_code,
            "accountName": self.account_name,
            "description": self.description,
            "type": self.type.value,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class JournalEntryInput:
    """Validated payload used to create or replace a journal entry."""

    entry_number: str
    date: date
    status: EntryStatus
    items: tuple[JournalItem, ...]
    description: str = ""
    reference: str = ""

    @property
    def debit_total(self) -> Decimal:
        return _total(self.items, EntryType.DEBIT)

    @property
    def credit_total(self) -> Decimal:
        return _total(self.items, EntryType.CREDIT)


@dataclass(frozen=True)
class JournalEntry:
    """Domain entity: a journal entry header with its lines.

    `amount` is the total of the debit lines.
    """

    id: int
    entry_number: str
    date: date
    status: EntryStatus
    amount: Decimal
    description: str = ""
    reference: str = ""
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple[JournalItem, ...] = field(default_factory=tuple)

    @property
    def debit_total(self) -> Decimal:
        return _total(self.items, EntryType.DEBIT)

    @property
    def credit_total(self) -> Decimal:
        return _total(self.items, EntryType.CREDIT)

    def to_dict(self, *, with_items: bool = False) -> dict:
        out = {
            "id": self.id,
            "entryNumber": self.entry_number,
            "date": self.date,
            "description": self.description,
            "reference": self.reference,
            "status": self.status.value,
            "amount": self.amount,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
        }
        if with_items:
            out["totalDebit"] = self.debit_total
            out["totalCredit"] = self.credit_total
            out["items"] = [i.to_dict() for i in self.items]
        return out
