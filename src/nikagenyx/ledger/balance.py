"""Double-entry sign rules.

Every balance in the system is kept in the account's *normal* direction:
an Asset with more debits than credits has a positive balance, and so does a
Revenue account with more credits than debits. These helpers are the single
place where that convention lives.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Tuple

from ..core.constants import BALANCE_TOLERANCE
from ..core.enums import AccountType, EntryType

ZERO = Decimal("0.00")


def signed(account_type: AccountType, entry_type: EntryType, amount: Decimal) -> Decimal:
    """Effect of one journal line on the balance of an account of `account_type`."""
    increases = (entry_type == EntryType.DEBIT) == account_type.is_debit_normal
    return amount if increases else -amount


def net_change(account_type: AccountType, debit_total: Decimal, credit_total: Decimal) -> Decimal:
    """Signed effect of aggregated debit/credit totals."""
    return signed(account_type, EntryType.DEBIT, debit_total) + signed(
        account_type, EntryType.CREDIT, credit_total
    )


def split_balance(account_type: AccountType, balance: Decimal) -> Tuple[Decimal, Decimal]:
    """Place a normal-direction balance into (debit, credit) trial balance columns.

    A positive balance sits on the account's normal side; a negative
    (contra) balance moves to the other column as an absolute value.
    """
    if balance == 0:
        return ZERO, ZERO
    on_normal_side = balance > 0
    magnitude = abs(balance)
    if on_normal_side == account_type.is_debit_normal:
        return magnitude, ZERO
    return ZERO, magnitude


def is_balanced(debits: Decimal, credits: Decimal) -> bool:
    return abs(debits - credits) <= BALANCE_TOLERANCE


def running_balances(
    account_type: AccountType, opening: Decimal, lines: Iterable[Tuple[EntryType, Decimal]]
) -> List[Decimal]:
    """Balance after each line, seeded with `opening`. Lines must already be in ledger order."""
    out: List[Decimal] = []
    balance = opening
    for entry_type, amount in lines:
        balance += signed(account_type, entry_type, amount)
        out.append(balance)
    return out
