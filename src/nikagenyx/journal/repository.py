from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import EntryStatus
from .model import JournalEntry, JournalEntryInput


class JournalRepository(Protocol):
    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[JournalEntry]:
        """Headers only, newest first."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        """Header plus items (with account code/name)."""

        raise NotImplementedError

    def get_by_number(self, entry_number: str) -> Optional[JournalEntry]:
        raise NotImplementedError

    def create(self, data: JournalEntryInput, *, created_by: Optional[str]) -> int:
        """Store header, items and an audit record in one transaction."""

        raise NotImplementedError

    def replace(self, entry_id: int, data: JournalEntryInput, *, updated_by: Optional[str]) -> None:
        raise NotImplementedError

    def set_status(self, entry_id: int, status: EntryStatus, *, updated_by: Optional[str]) -> None:
        raise NotImplementedError

    def delete(self, entry_id: int, *, deleted_by: Optional[str]) -> None:
        raise NotImplementedError
