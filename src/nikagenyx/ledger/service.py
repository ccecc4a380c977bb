"""Ledger reports: account ledger, general ledger, trial balance and statements.

All figures come from posted journal lines plus each account's opening
balance. Reading is split from arithmetic: repositories return raw sums and
lines, and the sign rules in `balance` turn them into balances.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..accounts.model import Account, PostedTotals
from ..accounts.repository import AccountRepository
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_LEDGER_START
from ..core.enums import AccountType, EntryType
from ..core.exceptions import NotFoundError, ValidationError
from .balance import ZERO, is_balanced, net_change, running_balances, split_balance
from .model import (
    AccountLedger,
    BalanceSheet,
    IncomeStatement,
    LedgerLine,
    PostedLine,
    StatementLine,
    TrialBalance,
    TrialBalanceRow,
)
from .repository import LedgerRepository

logger = logging.getLogger(__name__)

_TYPE_ORDER = {t: n for n, t in enumerate(AccountType)}


def balance_from_totals(account: Account, totals: Mapping[int, PostedTotals]) -> Decimal:
    t = totals.get(account.id)
    if not t:
        return account.opening_balance
    return account.opening_balance + net_change(account.type, t.debit_total, t.credit_total)


def build_account_ledger(
    account: Account, opening: Decimal, lines: Sequence[PostedLine], *, start: date, end: date
) -> AccountLedger:
    balances = running_balances(account.type, opening, ((ln.type, ln.amount) for ln in lines))
    ledger_lines = tuple(LedgerLine(line=ln, running_balance=b) for ln, b in zip(lines, balances))
    return AccountLedger(
        account=account,
        start=start,
        end=end,
        opening_balance=opening,
        lines=ledger_lines,
        total_debit=sum((ln.amount for ln in lines if ln.type == EntryType.DEBIT), ZERO),
        total_credit=sum((ln.amount for ln in lines if ln.type == EntryType.CREDIT), ZERO),
        closing_balance=balances[-1] if balances else opening,
    )


def build_trial_balance(accounts: Iterable[Account], totals: Mapping[int, PostedTotals], as_of: date) -> TrialBalance:
    rows: list[TrialBalanceRow] = []
    for account in accounts:
        if not account.is_active:
            continue
        balance = balance_from_totals(account, totals)
        if balance == 0:
            continue
        debit, credit = split_balance(account.type, balance)
        rows.append(TrialBalanceRow(account=account, debit_balance=debit, credit_balance=credit))

    rows.sort(key=lambda r: (_TYPE_ORDER[r.account.type], r.account.code))
    total_debit = sum((r.debit_balance for r in rows), ZERO)
    total_credit = sum((r.credit_balance for r in rows), ZERO)
    return TrialBalance(
        as_of=as_of,
        rows=tuple(rows),
        total_debit=total_debit,
        total_credit=total_credit,
        balanced=is_balanced(total_debit, total_credit),
    )


class LedgerService:
    def __init__(
        self,
        ledger: LedgerRepository,
        accounts: AccountRepository,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._ledger = ledger
        self._accounts = accounts
        self._today = today

    def _range(self, start: Optional[date], end: Optional[date]) -> tuple[date, date]:
        start = start or DEFAULT_LEDGER_START
        end = end or self._today()
        require_date_range(start, end)
        return start, end

    def opening_balance(self, account: Account, start: date) -> Decimal:
        totals = self._accounts.posted_totals(before=start, account_id=account.id)
        return balance_from_totals(account, totals)

    def account_ledger(
        self, account_id: Optional[int], *, start: Optional[date] = None, end: Optional[date] = None
    ) -> AccountLedger:
        if account_id is None:
            raise ValidationError("Account ID is required")
        start, end = self._range(start, end)

        account = self._accounts.get_by_id(int(account_id))
        if not account:
            raise NotFoundError("Account not found")

        opening = self.opening_balance(account, start)
        lines = self._ledger.posted_lines(start=start, end=end, account_id=account.id)
        return build_account_ledger(account, opening, lines, start=start, end=end)

    def general_ledger(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        account_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
    ) -> list[AccountLedger]:
        start, end = self._range(start, end)
        lines = self._ledger.posted_lines(start=start, end=end, account_id=account_id, account_type=account_type)

        by_account: dict[int, list[PostedLine]] = defaultdict(list)
        for ln in lines:
            by_account[ln.account_id].append(ln)
        if not by_account:
            return []

        accounts = {a.id: a for a in self._accounts.list_all() if a.id in by_account}
        openings = self._accounts.posted_totals(before=start)

        ledgers = [
            build_account_ledger(
                account,
                balance_from_totals(account, openings),
                by_account[account.id],
                start=start,
                end=end,
            )
            for account in accounts.values()
        ]
        ledgers.sort(key=lambda led: led.account.code)
        return ledgers

    def trial_balance(self, as_of: Optional[date] = None) -> TrialBalance:
        as_of = as_of or self._today()
        totals = self._accounts.posted_totals(on_or_before=as_of)
        tb = build_trial_balance(self._accounts.list_all(), totals, as_of)
        if not tb.balanced:
            logger.warning(
                f"Trial balance as of {as_of} is out of balance: debits {tb.total_debit}, credits {tb.total_credit}"
            )
        return tb

    def income_statement(self, *, start: Optional[date] = None, end: Optional[date] = None) -> IncomeStatement:
        start, end = self._range(start, end)
        before = self._accounts.posted_totals(before=start)
        through = self._accounts.posted_totals(on_or_before=end)

        revenue: list[StatementLine] = []
        expenses: list[StatementLine] = []
        for account in self._accounts.list_all():
            if account.type not in (AccountType.REVENUE, AccountType.EXPENSE):
                continue
            # activity in range = movement through end minus movement before start
            activity = _movement(account, through) - _movement(account, before)
            if activity == 0:
                continue
            target = revenue if account.type == AccountType.REVENUE else expenses
            target.append(StatementLine(account=account, amount=activity))

        total_revenue = sum((ln.amount for ln in revenue), ZERO)
        total_expenses = sum((ln.amount for ln in expenses), ZERO)
        return IncomeStatement(
            start=start,
            end=end,
            revenue=tuple(revenue),
            expenses=tuple(expenses),
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            net_income=total_revenue - total_expenses,
        )

    def balance_sheet(self, as_of: Optional[date] = None) -> BalanceSheet:
        as_of = as_of or self._today()
        totals = self._accounts.posted_totals(on_or_before=as_of)

        sections: dict[AccountType, list[StatementLine]] = defaultdict(list)
        for account in self._accounts.list_all():
            balance = balance_from_totals(account, totals)
            if balance != 0:
                sections[account.type].append(StatementLine(account=account, amount=balance))

        def total(account_type: AccountType) -> Decimal:
            return sum((ln.amount for ln in sections[account_type]), ZERO)

        current_earnings = total(AccountType.REVENUE) - total(AccountType.EXPENSE)
        total_assets = total(AccountType.ASSET)
        total_liabilities = total(AccountType.LIABILITY)
        total_equity = total(AccountType.EQUITY) + current_earnings
        return BalanceSheet(
            as_of=as_of,
            assets=tuple(sections[AccountType.ASSET]),
            liabilities=tuple(sections[AccountType.LIABILITY]),
            equity=tuple(sections[AccountType.EQUITY]),
            current_earnings=current_earnings,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            balanced=is_balanced(total_assets, total_liabilities + total_equity),
        )


def _movement(account: Account, totals: Mapping[int, PostedTotals]) -> Decimal:
    t = totals.get(account.id)
    if not t:
        return ZERO
    return net_change(account.type, t.debit_total, t.credit_total)
