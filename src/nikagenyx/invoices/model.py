from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import InvoiceStatus, InvoiceType

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InvoiceItem:
    """An invoice line. Net, tax and amount are derived, never taken from the client."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    account_id: Optional[int] = None
    id: Optional[int] = None

    @property
    def net(self) -> Decimal:
        return to_cents(self.quantity * self.unit_price * (1 - self.discount_percent / HUNDRED))

    @property
    def tax_amount(self) -> Decimal:
        return to_cents(self.net * self.tax_rate / HUNDRED)

    @property
    def amount(self) -> Decimal:
        return self.net + self.tax_amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "discountPercent": self.discount_percent,
            "taxRate": self.tax_rate,
            "taxAmount": self.tax_amount,
            "amount": self.amount,
            "accountId": self.account_id,
        }


@dataclass(frozen=True)
class Party:
    name: str
    gstin: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class InvoiceInput:
    invoice_number: str
    invoice_type: InvoiceType
    status: InvoiceStatus
    date: date
    due_date: date
    party: Party
    items: tuple[InvoiceItem, ...]
    notes: Optional[str] = None
    terms: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return sum((i.net for i in self.items), Decimal("0.00"))

    @property
    def tax_total(self) -> Decimal:
        return sum((i.tax_amount for i in self.items), Decimal("0.00"))

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax_total


@dataclass(frozen=True)
class Invoice:
    id: int
    invoice_number: str
    invoice_type: InvoiceType
    status: InvoiceStatus
    date: date
    due_date: date
    party: Party
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal
    notes: Optional[str] = None
    terms: Optional[str] = None
    journal_entry_id: Optional[int] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple[InvoiceItem, ...] = field(default_factory=tuple)

    def to_dict(self, *, with_items: bool = False) -> dict:
        out = {
            "id": self.id,
            "invoiceNumber": self.invoice_number,
            "invoiceType": self.invoice_type.value,
            "status": self.status.value,
            "date": self.date,
            "dueDate": self.due_date,
            "partyName": self.party.name,
            "partyGstin": self.party.gstin,
            "partyAddress": self.party.address,
            "partyEmail": self.party.email,
            "partyPhone": self.party.phone,
            "subtotal": self.subtotal,
            "taxTotal": self.tax_total,
            "total": self.total,
            "notes": self.notes,
            "terms": self.terms,
            "journalEntryId": self.journal_entry_id,
            "createdBy": self.created_by,
            "createdAt": self.created_at,
        }
        if with_items:
            out["items"] = [i.to_dict() for i in self.items]
        return out
