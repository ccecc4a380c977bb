from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.validators import parse_amount, require_enum, require_non_empty
from ..core.constants import MAX_RATE
from ..core.enums import AccountType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..ledger.service import balance_from_totals
from .model import Account, AccountInput
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountView:
    """Account with its current balance (and parent, for the detail view)."""

    account: Account
    balance: Decimal
    parent_code: Optional[str] = None
    parent_name: Optional[str] = None

    def to_dict(self) -> dict:
        a = self.account
        out = {
            "id": a.id,
            "code": a.code,
            "name": a.name,
            "description": a.description,
            "type": a.type.value,
            "subtype": a.subtype,
            "isActive": a.is_active,
            "parentId": a.parent_id,
            "taxRate": a.tax_rate,
            "openingBalance": a.opening_balance,
            "balance": self.balance,
        }
        if a.parent_id is not None:
            out["parentCode"] = self.parent_code
            out["parentName"] = self.parent_name
        return out


class AccountService:
    """Use case: maintain the chart of accounts."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def list_accounts(self) -> list[AccountView]:
        totals = self._accounts.posted_totals()
        return [AccountView(account=a, balance=balance_from_totals(a, totals)) for a in self._accounts.list_all()]

    def get_account(self, account_id: int) -> AccountView:
        account = self._require(account_id)
        totals = self._accounts.posted_totals(account_id=account.id)
        parent = self._accounts.get_by_id(account.parent_id) if account.parent_id else None
        return AccountView(
            account=account,
            balance=balance_from_totals(account, totals),
            parent_code=parent.code if parent else None,
            parent_name=parent.name if parent else None,
        )

    def create_account(self, data: Mapping[str, Any], *, created_by: Optional[str] = None) -> int:
        payload = self._parse(data)
        if self._accounts.get_by_code(payload.code):
            raise ConflictError("Account code already exists")
        self._check_parent(payload.parent_id, own_id=None)

        account_id = self._accounts.create(payload, created_by=created_by)
        logger.info(f"Account {payload.code} ({payload.name}) created by {created_by}")
        return account_id

    def update_account(self, account_id: int, data: Mapping[str, Any]) -> None:
        self._require(account_id)
        payload = self._parse(data)

        same_code = self._accounts.get_by_code(payload.code)
        if same_code and same_code.id != int(account_id):
            raise ConflictError("Account code already exists")
        self._check_parent(payload.parent_id, own_id=int(account_id))

        self._accounts.update(int(account_id), payload)
        logger.info(f"Account {account_id} updated")

    def delete_account(self, account_id: int) -> None:
        self._require(account_id)
        if self._accounts.count_journal_lines(int(account_id)) > 0:
            raise ValidationError("Cannot delete account with existing transactions")
        if self._accounts.count_children(int(account_id)) > 0:
            raise ValidationError("Cannot delete account with child accounts")

        self._accounts.delete(int(account_id))
        logger.info(f"Account {account_id} deleted")

    def _require(self, account_id: int) -> Account:
        account = self._accounts.get_by_id(int(account_id))
        if not account:
            raise NotFoundError("Account not found")
        return account

    def _check_parent(self, parent_id: Optional[int], *, own_id: Optional[int]) -> None:
        if parent_id is None:
            return
        if own_id is not None and parent_id == own_id:
            raise ValidationError("An account cannot be its own parent")
        if not self._accounts.get_by_id(parent_id):
            raise ValidationError("Parent account does not exist")

    @staticmethod
    def _parse(data: Mapping[str, Any]) -> AccountInput:
        if not data.get("code") or not data.get("name") or not data.get("type"):
            raise ValidationError("Code, name, and type are required fields")

        parent_raw = data.get("parentId")
        try:
            parent_id = int(parent_raw) if parent_raw not in (None, "") else None
        except (TypeError, ValueError):
            raise ValidationError("Parent account id must be a number")

        return AccountInput(
            code=require_non_empty(data.get("code"), "Code"),
            name=require_non_empty(data.get("name"), "Name"),
            type=require_enum(data.get("type"), AccountType, "account type"),
            description=(data.get("description") or "").strip(),
            subtype=data.get("subtype") or None,
            is_active=data.get("isActive") is not False,
            parent_id=parent_id,
            tax_rate=parse_amount(data.get("taxRate"), "Tax rate", default=Decimal("0"), limit=MAX_RATE),
            opening_balance=parse_amount(data.get("openingBalance"), "Opening balance", default=Decimal("0")),
        )
