from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AccountType
from .model import PostedLine


class LedgerRepository(Protocol):
    def posted_lines(
        self,
        *,
        start: date,
        end: date,
        account_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
    ) -> Sequence[PostedLine]:
        """Posted lines with start <= date <= end, ordered by (date, entry_number, id).

        Each line names the first other account on the same entry as its contra account.
        """

        raise NotImplementedError
