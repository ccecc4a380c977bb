from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import AccountType


@dataclass(frozen=True)
class Account:
    """Domain entity: an account in the chart of accounts."""

    id: int
    code: str
    name: str
    type: AccountType
    description: str = ""
    subtype: Optional[str] = None
    is_active: bool = True
    parent_id: Optional[int] = None
    tax_rate: Decimal = Decimal("0")
    opening_balance: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class AccountInput:
    """Validated create/update payload."""

    code: str
    name: str
    type: AccountType
    description: str
    subtype: Optional[str]
    is_active: bool
    parent_id: Optional[int]
    tax_rate: Decimal
    opening_balance: Decimal


@dataclass(frozen=True)
class PostedTotals:
    """Debit and credit sums of posted journal lines for one account."""

    account_id: int
    debit_total: Decimal = Decimal("0.00")
    credit_total: Decimal = Decimal("0.00")
