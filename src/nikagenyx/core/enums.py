from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AccountType(str, Enum):
    """Account categories of the chart of accounts.

    - ASSET, EXPENSE: debit increases the balance, credit decreases it
    - LIABILITY, EQUITY, REVENUE: credit increases the balance, debit decreases it
    """

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"

    @property
    def is_debit_normal(self) -> bool:
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class EntryType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class EntryStatus(str, Enum):
    """Journal entry lifecycle. Only POSTED entries affect balances."""

    DRAFT = "draft"
    POSTED = "posted"


class InvoiceType(str, Enum):
    SALE = "sale"
    PURCHASE = "purchase"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class PayrollMode(str, Enum):
    FREELANCE = "freelance"
    FULLTIME = "fulltime"


class DayStatus(str, Enum):
    """Per-day attendance code shown on the calendar and used by payroll."""

    PRESENT = "P"
    HALF_DAY = "L"
    ABSENT = "A"
    NO_RECORD = "NA"


class ClockAction(str, Enum):
    IN = "in"
    OUT = "out"
