from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..accounts.model import Account
from ..core.enums import EntryType


@dataclass(frozen=True)
class PostedLine:
    """A journal line of a posted entry, as read for ledger reports."""

    id: int
    journal_entry_id: int
    entry_number: str
    date: date
    account_id: int
    type: EntryType
    amount: Decimal
    description: str = ""
    reference: str = ""
    contra_account_code: Optional[str] = None
    contra_account_name: Optional[str] = None


@dataclass(frozen=True)
class LedgerLine:
    line: PostedLine
    running_balance: Decimal

    def to_dict(self) -> dict:
        ln = self.line
        return {
            "id": ln.id,
            "journalEntryId": ln.journal_entry_id,
            "entryNumber": ln.entry_number,
            "date": ln.date,
            "description": ln.description,
            "reference": ln.reference,
            "contraAccountCode": ln.contra_account_code,
            "contraAccountName": ln.contra_account_name,
            "type": ln.type.value,
            "debit": ln.amount if ln.type == EntryType.DEBIT else Decimal("0.00"),
            "credit": ln.amount if ln.type == EntryType.CREDIT else Decimal("0.00"),
            "runningBalance": self.running_balance,
        }


@dataclass(frozen=True)
class AccountLedger:
    account: Account
    start: date
    end: date
    opening_balance: Decimal
    lines: tuple[LedgerLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal

    def to_dict(self) -> dict:
        return {
            "accountId": self.account.id,
            "accountCode": self.account.code,
            "accountName": self.account.name,
            "accountType": self.account.type.value,
            "startDate": self.start,
            "endDate": self.end,
            "openingBalance": self.opening_balance,
            "totalDebit": self.total_debit,
            "totalCredit": self.total_credit,
            "closingBalance": self.closing_balance,
            "entries": [ln.to_dict() for ln in self.lines],
        }


@dataclass(frozen=True)
class TrialBalanceRow:
    account: Account
    debit_balance: Decimal
    credit_balance: Decimal

    def to_dict(self) -> dict:
        return {
            "accountId": self.account.id,
            "accountCode": self.account.code,
            "accountName": self.account.name,
            "accountType": self.account.type.value,
            "accountSubtype": self.account.subtype,
            "debitBalance": self.debit_balance,
            "creditBalance": self.credit_balance,
        }


@dataclass(frozen=True)
class TrialBalance:
    as_of: date
    rows: tuple[TrialBalanceRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    balanced: bool

    def to_dict(self) -> dict:
        return {
            "asOf": self.as_of,
            "rows": [r.to_dict() for r in self.rows],
            "totalDebit": self.total_debit,
            "totalCredit": self.total_credit,
            "balanced": self.balanced,
        }


@dataclass(frozen=True)
class StatementLine:
    account: Account
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            "accountId": self.account.id,
            "accountCode": self.account.code,
            "accountName": self.account.name,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class IncomeStatement:
    start: date
    end: date
    revenue: tuple[StatementLine, ...]
    expenses: tuple[StatementLine, ...]
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal

    def to_dict(self) -> dict:
        return {
            "startDate": self.start,
            "endDate": self.end,
            "revenue": [ln.to_dict() for ln in self.revenue],
            "expenses": [ln.to_dict() for ln in self.expenses],
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses,
            "netIncome": self.net_income,
        }


@dataclass(frozen=True)
class BalanceSheet:
    as_of: date
    assets: tuple[StatementLine, ...]
    liabilities: tuple[StatementLine, ...]
    equity: tuple[StatementLine, ...]
    current_earnings: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    balanced: bool

    def to_dict(self) -> dict:
        return {
            "asOf": self.as_of,
            "assets": [ln.to_dict() for ln in self.assets],
            "liabilities": [ln.to_dict() for ln in self.liabilities],
            "equity": [ln.to_dict() for ln in self.equity],
            "currentEarnings": self.current_earnings,
            "totalAssets": self.total_assets,
            "totalLiabilities": self.total_liabilities,
            "totalEquity": self.total_equity,
            "balanced": self.balanced,
        }
