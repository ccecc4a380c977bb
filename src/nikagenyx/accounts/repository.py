from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import Account, AccountInput, PostedTotals


class AccountRepository(Protocol):
    """Repository interface for the chart of accounts.

    Note: services depend on this interface, not on a concrete database.
    """

    def list_all(self) -> Sequence[Account]:
        raise NotImplementedError

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Account]:
        raise NotImplementedError

    def create(self, data: AccountInput, *, created_by: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, account_id: int, data: AccountInput) -> bool:
        raise NotImplementedError

    def delete(self, account_id: int) -> bool:
        raise NotImplementedError

    def count_children(self, account_id: int) -> int:
        raise NotImplementedError

    def count_journal_lines(self, account_id: int) -> int:
        raise NotImplementedError

    def posted_totals(
        self,
        *,
        before: Optional[date] = None,
        on_or_before: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> Mapping[int, PostedTotals]:
        """Sum posted lines per account, optionally cut off by date."""

        raise NotImplementedError
