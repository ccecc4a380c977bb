from datetime import date
from decimal import Decimal

import pytest

from nikagenyx.core.enums import EntryStatus, EntryType, InvoiceStatus
from nikagenyx.core.exceptions import ConflictError, ValidationError
from nikagenyx.invoices.service import InvoiceService
from nikagenyx.ledger.service import LedgerService


def _sale(number="INV-2025-0007", status="sent", **extra):
    data = {
        "invoiceNumber": number,
        "invoiceType": "sale",
        "status": status,
        "date": "2025-03-03",
        "dueDate": "2025-04-02",
        "partyName": "Lotus Traders",
        "partyGstin": "29ABCDE1234F1Z5",
        "items": [
            {"description": "Consulting", "quantity": 2, "unitPrice": "500", "taxRate": 18},
            {"description": "Setup", "quantity": 1, "unitPrice": "200", "discountPercent": 10},
        ],
    }
    data.update(extra)
    return data


@pytest.fixture
def service(invoices_repo, accounts_repo, journal_repo, settings):
    return InvoiceService(invoices_repo, accounts_repo, journal_repo, ledger_accounts=settings.LEDGER_ACCOUNTS)


def test_totals_are_derived_from_items(service):
    invoice_id, journal_entry_id = service.create_invoice(_sale())

    invoice = service.get_invoice(invoice_id)
    assert journal_entry_id is None
    assert invoice.subtotal == Decimal("1180.00")
    assert invoice.tax_total == Decimal("180.00")
    assert invoice.total == Decimal("1360.00")


def test_sale_auto_post_creates_balanced_posted_entry(service, journal_repo):
    invoice_id, journal_entry_id = service.create_invoice(_sale(autoPost=True), created_by="NGX000001")

    entry = journal_repo.get_by_id(journal_entry_id)
    assert entry.entry_number == "JE-SALE-0007"
    assert entry.status == EntryStatus.POSTED
    assert entry.reference == "INV-2025-0007"
    lines = {(i.account_code, i.type): i.amount for i in entry.items}
    assert lines == {
        ("1200", EntryType.DEBIT): Decimal("1360.00"),
        ("4000", EntryType.CREDIT): Decimal("1180.00"),
        ("2200", EntryType.CREDIT): Decimal("180.00"),
    }
    assert service.get_invoice(invoice_id).journal_entry_id == journal_entry_id


def test_purchase_auto_post_debits_expense_and_credits_payable(service, journal_repo):
    data = _sale("BILL-0042", invoiceType="purchase", autoCreateJournalEntry=True)
    data["items"] = [{"description": "Printer paper", "quantity": 10, "unitPrice": "45", "taxRate": 5, "accountId": 8}]

    _, journal_entry_id = service.create_invoice(data)

    entry = journal_repo.get_by_id(journal_entry_id)
    assert entry.entry_number == "JE-PURCH-0042"
    lines = {(i.account_code, i.type): i.amount for i in entry.items}
    assert lines == {
        ("2000", EntryType.CREDIT): Decimal("472.50"),
        ("5100", EntryType.DEBIT): Decimal("450.00"),
        ("2200", EntryType.DEBIT): Decimal("22.50"),
    }


def test_draft_invoice_is_never_posted(service):
    _, journal_entry_id = service.create_invoice(_sale(status="draft", autoPost=True))
    assert journal_entry_id is None


def test_auto_posted_sale_shows_in_trial_balance(service, accounts_repo, ledger_repo):
    service.create_invoice(_sale(autoPost=True))

    tb = LedgerService(ledger_repo, accounts_repo).trial_balance(date(2025, 3, 31))
    assert tb.balanced
    assert tb.total_debit == Decimal("1360.00")


def test_zero_total_cannot_be_posted(service):
    data = _sale(autoPost=True)
    data["items"] = [{"description": "Free sample", "quantity": 1, "unitPrice": "0"}]
    with pytest.raises(ValidationError):
        service.create_invoice(data)


def test_missing_control_account_is_reported(invoices_repo, accounts_repo, journal_repo, settings):
    service = InvoiceService(
        invoices_repo, accounts_repo, journal_repo, ledger_accounts={**settings.LEDGER_ACCOUNTS, "tax_payable": "9999"}
    )
    with pytest.raises(ValidationError, match="tax payable"):
        service.create_invoice(_sale(autoPost=True))


def test_duplicate_invoice_number_is_a_conflict(service):
    service.create_invoice(_sale())
    with pytest.raises(ConflictError):
        service.create_invoice(_sale())


def test_existing_journal_number_is_a_conflict(service):
    service.create_invoice(_sale("INV-2024-0007", autoPost=True))
    with pytest.raises(ConflictError, match="JE-SALE-0007"):
        service.create_invoice(_sale("INV-2025-0007", autoPost=True))


def test_due_date_before_date_is_rejected(service):
    with pytest.raises(ValidationError):
        service.create_invoice(_sale(dueDate="2025-03-01"))


def test_status_transitions(service):
    invoice_id, _ = service.create_invoice(_sale(status="draft"))

    service.update_status(invoice_id, "sent")
    service.update_status(invoice_id, "paid")
    assert service.get_invoice(invoice_id).status == InvoiceStatus.PAID
    with pytest.raises(ValidationError):
        service.update_status(invoice_id, "draft")


def test_only_draft_invoices_can_be_deleted(service):
    sent_id, _ = service.create_invoice(_sale("INV-1"))
    draft_id, _ = service.create_invoice(_sale("INV-2", status="draft"))

    with pytest.raises(ValidationError):
        service.delete_invoice(sent_id)
    service.delete_invoice(draft_id)
    assert [i.id for i in service.list_invoices()] == [sent_id]


@pytest.mark.parametrize(
    "item",
    [
        {"description": "Bulk", "quantity": "1e30", "unitPrice": "1"},
        {"description": "Bulk", "quantity": "1", "unitPrice": "1e30"},
        {"description": "Bulk", "quantity": "1", "unitPrice": "10", "taxRate": "1000"},
    ],
)
def test_values_beyond_column_size_are_rejected(service, item):
    with pytest.raises(ValidationError, match="must not exceed"):
        service.create_invoice(_sale(items=[item]))


def test_invoice_total_beyond_column_size_is_rejected(service):
    item = {"description": "Fleet", "quantity": "999999", "unitPrice": "9999999999"}
    with pytest.raises(ValidationError, match="Invoice total"):
        service.create_invoice(_sale(items=[item]))
