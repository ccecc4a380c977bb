from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..accounts.repository import AccountRepository
from ..common.validators import parse_amount, parse_date_field, require_enum, require_non_empty
from ..core.constants import MAX_MONEY, MAX_QUANTITY, MAX_RATE
from ..core.enums import EntryStatus, EntryType, InvoiceStatus, InvoiceType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..journal.model import JournalEntryInput, JournalItem
from ..journal.repository import JournalRepository
from ..journal.service import ensure_balanced
from .model import Invoice, InvoiceInput, InvoiceItem, Party
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def journal_entry_number(invoice: InvoiceInput) -> str:
    prefix = "JE-SALE" if invoice.invoice_type == InvoiceType.SALE else "JE-PURCH"
    return f"{prefix}-{invoice.invoice_number.split('-')[-1]}"


class InvoiceService:
    """Use case: record sales and purchase invoices, optionally posting them to the journal.

    `ledger_accounts` maps the control account roles (accounts_receivable,
    accounts_payable, tax_payable, sales, purchases) to account codes.
    """

    def __init__(
        self,
        invoices: InvoiceRepository,
        accounts: AccountRepository,
        journal: JournalRepository,
        *,
        ledger_accounts: Mapping[str, str],
    ):
        self._invoices = invoices
        self._accounts = accounts
        self._journal = journal
        self._ledger_accounts = dict(ledger_accounts)

    def list_invoices(
        self,
        *,
        invoice_type: Optional[str] = None,
        status: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Invoice]:
        return self._invoices.list_invoices(
            invoice_type=require_enum(invoice_type, InvoiceType, "invoice type") if invoice_type else None,
            status=require_enum(status, InvoiceStatus, "status") if status and status != "all" else None,
            start=start,
            end=end,
        )

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self._invoices.get_by_id(int(invoice_id))
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    def create_invoice(self, data: Mapping[str, Any], *, created_by: Optional[str] = None) -> tuple[int, Optional[int]]:
        payload = self._parse(data)
        if self._invoices.get_by_number(payload.invoice_number):
            raise ConflictError("Invoice number already exists")

        auto_post = bool(data.get("autoPost") or data.get("autoCreateJournalEntry"))
        journal = None
        if payload.status != InvoiceStatus.DRAFT and auto_post:
            journal = self.build_journal_entry(payload)
            if self._journal.get_by_number(journal.entry_number):
                raise ConflictError(f"Journal entry number {journal.entry_number} already exists")

        invoice_id, journal_entry_id = self._invoices.create(payload, created_by=created_by, journal=journal)
        logger.info(
            f"Invoice {payload.invoice_number} ({payload.invoice_type.value}, {payload.total}) created by {created_by}"
            + (f", posted as {journal.entry_number}" if journal else "")
        )
        return invoice_id, journal_entry_id

    def update_status(self, invoice_id: int, status: Any, *, updated_by: Optional[str] = None) -> None:
        invoice = self.get_invoice(invoice_id)
        new_status = require_enum(status, InvoiceStatus, "status")
        if new_status not in ALLOWED_TRANSITIONS[invoice.status]:
            raise ValidationError(f"Cannot change invoice status from {invoice.status.value} to {new_status.value}")

        self._invoices.set_status(invoice.id, new_status, updated_by=updated_by)
        logger.info(f"Invoice {invoice.invoice_number} moved {invoice.status.value} -> {new_status.value}")

    def delete_invoice(self, invoice_id: int, *, deleted_by: Optional[str] = None) -> None:
        invoice = self.get_invoice(invoice_id)
        if invoice.status != InvoiceStatus.DRAFT:
            raise ValidationError("Only draft invoices can be deleted")
        self._invoices.delete(invoice.id, deleted_by=deleted_by)
        logger.info(f"Invoice {invoice.invoice_number} deleted by {deleted_by}")

    def build_journal_entry(self, invoice: InvoiceInput) -> JournalEntryInput:
        """Posted, balanced entry for a sale (Dr AR / Cr revenue, tax) or purchase (Dr expense, tax / Cr AP)."""
        if invoice.total <= 0:
            raise ValidationError("Cannot post an invoice with a zero total")
        is_sale = invoice.invoice_type == InvoiceType.SALE
        control = self._control_account("accounts_receivable" if is_sale else "accounts_payable")
        default_line_account = self._control_account("sales" if is_sale else "purchases")
        line_side = EntryType.CREDIT if is_sale else EntryType.DEBIT
        control_side = EntryType.DEBIT if is_sale else EntryType.CREDIT

        grouped: "OrderedDict[int, Decimal]" = OrderedDict()
        for item in invoice.items:
            account_id = item.account_id or default_line_account
            grouped[account_id] = grouped.get(account_id, Decimal("0.00")) + item.net

        label = "Sales" if is_sale else "Purchase"
        items = [
            JournalItem(
                account_id=control,
                type=control_side,
                amount=invoice.total,
                description=f"Invoice {invoice.invoice_number} - {invoice.party.name}",
            )
        ]
        items.extend(
            JournalItem(
                account_id=account_id,
                type=line_side,
                amount=amount,
                description=f"{label} - Invoice {invoice.invoice_number}",
            )
            for account_id, amount in grouped.items()
            if amount > 0
        )
        if invoice.tax_total > 0:
            items.append(
                JournalItem(
                    account_id=self._control_account("tax_payable"),
                    type=line_side,
                    amount=invoice.tax_total,
                    description=f"Tax - Invoice {invoice.invoice_number}",
                )
            )

        entry = JournalEntryInput(
            entry_number=journal_entry_number(invoice),
            date=invoice.date,
            status=EntryStatus.POSTED,
            items=tuple(items),
            description=f"{label} Invoice {invoice.invoice_number} for {invoice.party.name}",
            reference=invoice.invoice_number,
        )
        ensure_balanced(entry)
        return entry

    def _control_account(self, role: str) -> int:
        code = self._ledger_accounts.get(role)
        account = self._accounts.get_by_code(code) if code else None
        if not account:
            raise ValidationError(f"Ledger account for {role.replace('_', ' ')} is not configured")
        return account.id

    def _parse(self, data: Mapping[str, Any]) -> InvoiceInput:
        required = ("invoiceNumber", "invoiceType", "status", "date", "dueDate", "partyName")
        if any(not data.get(k) for k in required):
            raise ValidationError(
                "Missing required fields. Invoice number, type, status, dates and party name are required."
            )

        invoice_date = parse_date_field(data.get("date"), "Date")
        due_date = parse_date_field(data.get("dueDate"), "Due date")
        if due_date < invoice_date:
            raise ValidationError("Due date cannot be before the invoice date")

        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise ValidationError("Items must be a list")

        payload = InvoiceInput(
            invoice_number=require_non_empty(data.get("invoiceNumber"), "Invoice number"),
            invoice_type=require_enum(data.get("invoiceType"), InvoiceType, "invoice type"),
            status=require_enum(data.get("status"), InvoiceStatus, "status"),
            date=invoice_date,
            due_date=due_date,
            party=Party(
                name=require_non_empty(data.get("partyName"), "Party name"),
                gstin=data.get("partyGstin") or None,
                address=data.get("partyAddress") or None,
                email=data.get("partyEmail") or None,
                phone=data.get("partyPhone") or None,
            ),
            items=tuple(self._parse_item(i, n) for n, i in enumerate(raw_items, start=1)),
            notes=data.get("notes") or None,
            terms=data.get("terms") or None,
        )
        if payload.total > MAX_MONEY:
            raise ValidationError(f"Invoice total must not exceed {MAX_MONEY}")
        return payload

    def _parse_item(self, raw: Any, line_no: int) -> InvoiceItem:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Line {line_no}: item must be an object")

        quantity = _parse_decimal(raw.get("quantity"), f"Line {line_no}: quantity", limit=MAX_QUANTITY)
        if quantity <= 0:
            raise ValidationError(f"Line {line_no}: quantity must be greater than zero")
        unit_price = parse_amount(raw.get("unitPrice"), f"Line {line_no}: unit price")
        if unit_price < 0:
            raise ValidationError(f"Line {line_no}: unit price cannot be negative")
        discount = _parse_decimal(
            raw.get("discountPercent"), f"Line {line_no}: discount", default=Decimal("0"), limit=MAX_RATE
        )
        tax_rate = _parse_decimal(
            raw.get("taxRate"), f"Line {line_no}: tax rate", default=Decimal("0"), limit=MAX_RATE
        )
        if not (0 <= discount <= 100) or tax_rate < 0:
            raise ValidationError(f"Line {line_no}: discount must be 0-100 and tax rate not negative")

        account_id = raw.get("accountId")
        if account_id not in (None, ""):
            try:
                account_id = int(account_id)
            except (TypeError, ValueError):
                raise ValidationError(f"Line {line_no}: account id must be a number")
            if not self._accounts.get_by_id(account_id):
                raise ValidationError(f"Line {line_no}: account {account_id} does not exist")
        else:
            account_id = None

        return InvoiceItem(
            description=require_non_empty(raw.get("description"), f"Line {line_no}: description"),
            quantity=quantity,
            unit_price=unit_price,
            discount_percent=discount,
            tax_rate=tax_rate,
            account_id=account_id,
        )


def _parse_decimal(
    value: Any, field_name: str, *, default: Optional[Decimal] = None, limit: Decimal = MAX_MONEY
) -> Decimal:
    # quantities and percentages keep their own precision
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required")
    try:
        parsed = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"{field_name} is not a valid number")
    if not parsed.is_finite():
        raise ValidationError(f"{field_name} is not a valid number")
    if abs(parsed) > limit:
        raise ValidationError(f"{field_name} must not exceed {limit}")
    return parsed
