from __future__ import annotations

import smtplib
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from nikagenyx.accounts.model import Account, PostedTotals
from nikagenyx.attendance.model import AttendanceRecord
from nikagenyx.core.enums import AccountType, EntryStatus, EntryType, PayrollMode, Role
from nikagenyx.employees.model import Employee
from nikagenyx.invoices.model import Invoice
from nikagenyx.journal.model import JournalEntry
from nikagenyx.ledger.model import PostedLine

LEDGER_ACCOUNTS = {
    "accounts_receivable": "1200",
    "accounts_payable": "2000",
    "tax_payable": "2200",
    "sales": "4000",
    "purchases": "5000",
}

CHART = [
    (1, "1000", "Cash", AccountType.ASSET),
    (2, "1200", "Accounts Receivable", AccountType.ASSET),
    (3, "2000", "Accounts Payable", AccountType.LIABILITY),
    (4, "2200", "GST Payable", AccountType.LIABILITY),
    (5, "3000", "Owner's Capital", AccountType.EQUITY),
    (6, "4000", "Sales", AccountType.REVENUE),
    (7, "5000", "Purchases", AccountType.EXPENSE),
    (8, "5100", "Rent", AccountType.EXPENSE),
]


class BookStore:
    """Shared in-memory tables behind the accounting fakes."""

    def __init__(self):
        self.accounts: dict[int, Account] = {}
        self.entries: dict[int, JournalEntry] = {}
        self.invoices: dict[int, Invoice] = {}
        self._entry_id = 0
        self._invoice_id = 0

    def next_entry_id(self) -> int:
        self._entry_id += 1
        return self._entry_id

    def next_invoice_id(self) -> int:
        self._invoice_id += 1
        return self._invoice_id

    def posted_entries(self):
        return [e for e in self.entries.values() if e.status == EntryStatus.POSTED]


class InMemoryAccounts:
    def __init__(self, store: BookStore):
        self._store = store

    def add(self, account: Account) -> Account:
        self._store.accounts[account.id] = account
        return account

    def list_all(self):
        return sorted(self._store.accounts.values(), key=lambda a: a.code)

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self._store.accounts.get(account_id)

    def get_by_code(self, code: str) -> Optional[Account]:
        return next((a for a in self._store.accounts.values() if a.code == code), None)

    def create(self, data, *, created_by):
        account_id = max(self._store.accounts, default=0) + 1
        self._store.accounts[account_id] = Account(id=account_id, **data.__dict__)
        return account_id

    def update(self, account_id: int, data) -> bool:
        self._store.accounts[account_id] = Account(id=account_id, **data.__dict__)
        return True

    def delete(self, account_id: int) -> bool:
        return self._store.accounts.pop(account_id, None) is not None

    def count_children(self, account_id: int) -> int:
        return sum(1 for a in self._store.accounts.values() if a.parent_id == account_id)

    def count_journal_lines(self, account_id: int) -> int:
        return sum(1 for e in self._store.entries.values() for i in e.items if i.account_id == account_id)

    def posted_totals(self, *, before=None, on_or_before=None, account_id=None):
        totals: dict[int, PostedTotals] = {}
        for entry in self._store.posted_entries():
            if before is not None and entry.date >= before:
                continue
            if on_or_before is not None and entry.date > on_or_before:
                continue
            for item in entry.items:
                if account_id is not None and item.account_id != account_id:
                    continue
                t = totals.get(item.account_id, PostedTotals(account_id=item.account_id))
                if item.type == EntryType.DEBIT:
                    t = replace(t, debit_total=t.debit_total + item.amount)
                else:
                    t = replace(t, credit_total=t.credit_total + item.amount)
                totals[item.account_id] = t
        return totals


class InMemoryJournal:
    def __init__(self, store: BookStore):
        self._store = store

    def list_entries(self, *, start=None, end=None, status=None):
        out = [
            replace(e, items=())
            for e in self._store.entries.values()
            if (start is None or e.date >= start)
            and (end is None or e.date <= end)
            and (status is None or e.status == status)
        ]
        return sorted(out, key=lambda e: (e.date, e.id), reverse=True)

    def get_by_id(self, entry_id: int):
        entry = self._store.entries.get(entry_id)
        if not entry:
            return None
        items = []
        for item in entry.items:
            account = self._store.accounts.get(item.account_id)
            items.append(
                replace(item, account_code=account.code if account else None, account_name=account.name if account else None)
            )
        return replace(entry, items=tuple(items))

    def get_by_number(self, entry_number: str):
        return next((e for e in self._store.entries.values() if e.entry_number == entry_number), None)

    def _build(self, entry_id: int, data, created_by) -> JournalEntry:
        return JournalEntry(
            id=entry_id,
            entry_number=data.entry_number,
            date=data.date,
            status=data.status,
            amount=data.debit_total,
            description=data.description,
            reference=data.reference,
            created_by=created_by,
            items=tuple(replace(i, id=n) for n, i in enumerate(data.items, start=1)),
        )

    def create(self, data, *, created_by):
        entry_id = self._store.next_entry_id()
        self._store.entries[entry_id] = self._build(entry_id, data, created_by)
        return entry_id

    def replace(self, entry_id: int, data, *, updated_by):
        created_by = self._store.entries[entry_id].created_by
        self._store.entries[entry_id] = self._build(entry_id, data, created_by)

    def set_status(self, entry_id: int, status, *, updated_by):
        self._store.entries[entry_id] = replace(self._store.entries[entry_id], status=status)

    def delete(self, entry_id: int, *, deleted_by):
        del self._store.entries[entry_id]


class InMemoryLedger:
    def __init__(self, store: BookStore):
        self._store = store

    def posted_lines(self, *, start, end, account_id=None, account_type=None):
        lines = []
        for entry in self._store.posted_entries():
            if not (start <= entry.date <= end):
                continue
            for item in entry.items:
                account = self._store.accounts[item.account_id]
                if account_id is not None and item.account_id != account_id:
                    continue
                if account_type is not None and account.type != account_type:
                    continue
                contra = next((i for i in entry.items if i.account_id != item.account_id), None)
                contra_account = self._store.accounts.get(contra.account_id) if contra else None
                lines.append(
                    PostedLine(
                        id=entry.id * 100 + (item.id or 0),
                        journal_entry_id=entry.id,
                        entry_number=entry.entry_number,
                        date=entry.date,
                        account_id=item.account_id,
                        type=item.type,
                        amount=item.amount,
                        description=item.description,
                        reference=entry.reference,
                        contra_account_code=contra_account.code if contra_account else None,
                        contra_account_name=contra_account.name if contra_account else None,
                    )
                )
        return sorted(lines, key=lambda ln: (ln.date, ln.entry_number, ln.id))


class InMemoryInvoices:
    def __init__(self, store: BookStore, journal: InMemoryJournal):
        self._store = store
        self._journal = journal

    def list_invoices(self, *, invoice_type=None, status=None, start=None, end=None):
        return [
            replace(i, items=())
            for i in self._store.invoices.values()
            if (invoice_type is None or i.invoice_type == invoice_type)
            and (status is None or i.status == status)
            and (start is None or i.date >= start)
            and (end is None or i.date <= end)
        ]

    def get_by_id(self, invoice_id: int):
        return self._store.invoices.get(invoice_id)

    def get_by_number(self, invoice_number: str):
        return next((i for i in self._store.invoices.values() if i.invoice_number == invoice_number), None)

    def create(self, data, *, created_by, journal=None):
        journal_entry_id = self._journal.create(journal, created_by=created_by) if journal else None
        invoice_id = self._store.next_invoice_id()
        self._store.invoices[invoice_id] = Invoice(
            id=invoice_id,
            invoice_number=data.invoice_number,
            invoice_type=data.invoice_type,
            status=data.status,
            date=data.date,
            due_date=data.due_date,
            party=data.party,
            subtotal=data.subtotal,
            tax_total=data.tax_total,
            total=data.total,
            notes=data.notes,
            terms=data.terms,
            journal_entry_id=journal_entry_id,
            created_by=created_by,
            items=data.items,
        )
        return invoice_id, journal_entry_id

    def set_status(self, invoice_id: int, status, *, updated_by):
        self._store.invoices[invoice_id] = replace(self._store.invoices[invoice_id], status=status)

    def delete(self, invoice_id: int, *, deleted_by):
        del self._store.invoices[invoice_id]


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.by_id: dict[str, Employee] = {e.emp_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self.by_id[employee.emp_id] = employee
        return employee

    def get_by_id(self, emp_id: str):
        return self.by_id.get(emp_id)

    def list_all(self, *, active_only: bool = False):
        return [e for _, e in sorted(self.by_id.items()) if e.is_active or not active_only]

    def list_by_ids(self, emp_ids):
        return [self.by_id[e] for e in emp_ids if e in self.by_id]

    def find_by_phone(self, phone: str):
        return next((e for e in self.by_id.values() if e.phone == phone), None)

    def find_by_name_and_dob(self, name: str, dob: date):
        return next((e for e in self.by_id.values() if e.name == name and e.dob == dob), None)

    def create(self, data) -> None:
        self.by_id[data.emp_id] = Employee(
            emp_id=data.emp_id,
            name=data.name,
            role=data.role,
            pin_hash=data.pin_hash,
            department=data.department,
            phone=data.phone,
            dob=data.dob,
            email=data.email,
            address=data.address,
            mfa_secret=data.mfa_secret,
        )

    def _set(self, emp_id: str, **changes) -> None:
        self.by_id[emp_id] = replace(self.by_id[emp_id], **changes)

    def update_profile(self, emp_id: str, fields) -> None:
        self._set(emp_id, **fields)

    def set_role(self, emp_id: str, role: Role) -> None:
        self._set(emp_id, role=role)

    def delete(self, emp_id: str) -> bool:
        return self.by_id.pop(emp_id, None) is not None

    def set_failed_pin_attempts(self, emp_id: str, attempts: int) -> None:
        self._set(emp_id, failed_pin_attempts=attempts)

    def set_failed_mfa_attempts(self, emp_id: str, attempts: int) -> None:
        self._set(emp_id, failed_mfa_attempts=attempts)

    def set_mfa_secret(self, emp_id: str, secret: str) -> None:
        self._set(emp_id, mfa_secret=secret, failed_mfa_attempts=0)

    def set_reset_pin_ready(self, emp_id: str, ready: bool) -> None:
        self._set(emp_id, reset_pin_ready=ready)

    def set_pin(self, emp_id: str, pin_hash: str) -> None:
        self._set(emp_id, pin_hash=pin_hash, failed_pin_attempts=0, reset_pin_ready=False)


class InMemoryAttendance:
    def __init__(self):
        self.by_key: dict[tuple[str, date], AttendanceRecord] = {}

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.by_key[(record.emp_id, record.work_date)] = record
        return record

    def get_for_employee_and_date(self, emp_id: str, work_date: date):
        return self.by_key.get((emp_id, work_date))

    def create_clock_in(self, *, emp_id, work_date, clock_in) -> None:
        self.by_key[(emp_id, work_date)] = AttendanceRecord(emp_id=emp_id, work_date=work_date, clock_in=clock_in)

    def update_clock_out(self, *, emp_id, work_date, clock_out, duration_seconds) -> None:
        record = self.by_key[(emp_id, work_date)]
        self.by_key[(emp_id, work_date)] = replace(record, clock_out=clock_out, work_duration_seconds=duration_seconds)

    def list_range(self, *, start, end, emp_id=None):
        return [
            r
            for (e, d), r in sorted(self.by_key.items())
            if start <= d <= end and (emp_id is None or e == emp_id)
        ]


class InMemoryPayrollModes:
    def __init__(self, mode: Optional[PayrollMode] = None):
        self.mode = mode

    def get_mode(self):
        return self.mode

    def set_mode(self, mode: PayrollMode) -> None:
        self.mode = mode


class RecordingMailer:
    def __init__(self, *, fail_for: tuple[str, ...] = ()):
        self.sent: list[dict] = []
        self._fail_for = set(fail_for)

    def send(self, *, to, subject, body, sender_name=None, reply_to=None) -> None:
        if to in self._fail_for:
            raise smtplib.SMTPRecipientsRefused({to: (550, b"mailbox unavailable")})
        self.sent.append({"to": to, "subject": subject, "body": body, "sender_name": sender_name, "reply_to": reply_to})


def new_employee(emp_id: str = "NGX000002", **overrides) -> Employee:
    fields = dict(
        emp_id=emp_id,
        name="Asha Rao",
        role=Role.EMPLOYEE,
        pin_hash=generate_password_hash("4321"),
        department="Finance",
        phone="9876500000",
        dob=date(1992, 4, 18),
        email="asha@example.com",
        daily_rate=Decimal("800.00"),
        monthly_salary=Decimal("22000.00"),
    )
    fields.update(overrides)
    return Employee(**fields)


@pytest.fixture
def make_employee():
    return new_employee


@pytest.fixture
def fixed_now():
    # a Wednesday
    return datetime(2025, 3, 12, 10, 0, 0)


@pytest.fixture
def store():
    return BookStore()


@pytest.fixture
def accounts_repo(store):
    repo = InMemoryAccounts(store)
    for account_id, code, name, account_type in CHART:
        repo.add(Account(id=account_id, code=code, name=name, type=account_type))
    return repo


@pytest.fixture
def journal_repo(store):
    return InMemoryJournal(store)


@pytest.fixture
def ledger_repo(store):
    return InMemoryLedger(store)


@pytest.fixture
def invoices_repo(store, journal_repo):
    return InMemoryInvoices(store, journal_repo)


@pytest.fixture
def employees_repo():
    admin = new_employee(
        "NGX000001",
        name="Nika Admin",
        role=Role.ADMIN,
        phone="9000000001",
        email="admin@example.com",
        mfa_secret="JBSWY3DPEHPK3PXP",
    )
    return InMemoryEmployees(admin, new_employee())


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return RecordingMailer(fail_for=("asha@example.com",))


@pytest.fixture
def payroll_modes():
    return InMemoryPayrollModes()


@pytest.fixture
def settings():
    return SimpleNamespace(
        JWT_SECRET="test-jwt-secret",
        JWT_ALGORITHM="HS256",
        JWT_EXPIRES_HOURS=1,
        MFA_ISSUER="Nikagenyx",
        MFA_MAX_FAILED_ATTEMPTS=3,
        PIN_MAX_FAILED_ATTEMPTS=5,
        SMTP_CONFIG={"admin_address": "hr@example.com"},
        LEDGER_ACCOUNTS=LEDGER_ACCOUNTS,
        ATTENDANCE_RULES={},
        PAYROLL_OVERTIME_MULTIPLIER="1.5",
    )
