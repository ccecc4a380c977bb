from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..accounts.repository import AccountRepository
from ..common.validators import parse_amount, parse_date_field, require_enum, require_non_empty
from ..core.constants import MAX_MONEY
from ..core.enums import EntryStatus, EntryType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..ledger.balance import is_balanced
from .model import JournalEntry, JournalEntryInput, JournalItem
from .repository import JournalRepository

logger = logging.getLogger(__name__)


def ensure_balanced(data: JournalEntryInput) -> None:
    if not is_balanced(data.debit_total, data.credit_total):
        raise ValidationError("Journal entry must be balanced. Debits must equal credits.")
    if data.debit_total > MAX_MONEY:
        raise ValidationError(f"Journal entry total must not exceed {MAX_MONEY}")


class JournalService:
    """Use case: record double-entry journal entries and move them from draft to posted."""

    def __init__(self, journal: JournalRepository, accounts: AccountRepository):
        self._journal = journal
        self._accounts = accounts

    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[str] = None,
    ) -> Sequence[JournalEntry]:
        status_filter = None
        if status and status != "all":
            status_filter = require_enum(status, EntryStatus, "status")
        return self._journal.list_entries(start=start, end=end, status=status_filter)

    def get_entry(self, entry_id: int) -> JournalEntry:
        entry = self._journal.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Journal entry not found")
        return entry

    def create_entry(self, data: Mapping[str, Any], *, created_by: Optional[str] = None) -> int:
        payload = self._parse(data)
        if self._journal.get_by_number(payload.entry_number):
            raise ConflictError("Journal entry number already exists")

        entry_id = self._journal.create(payload, created_by=created_by)
        logger.info(
            f"Journal entry {payload.entry_number} created ({payload.status.value}, {payload.debit_total}) by {created_by}"
        )
        return entry_id

    def update_entry(self, entry_id: int, data: Mapping[str, Any], *, updated_by: Optional[str] = None) -> None:
        entry = self.get_entry(entry_id)
        if entry.status != EntryStatus.DRAFT:
            raise ValidationError("Only draft journal entries can be updated")

        payload = self._parse(data)
        same_number = self._journal.get_by_number(payload.entry_number)
        if same_number and same_number.id != entry.id:
            raise ConflictError("Journal entry number already exists")

        self._journal.replace(entry.id, payload, updated_by=updated_by)
        logger.info(f"Journal entry {entry.entry_number} updated by {updated_by}")

    def post_entry(self, entry_id: int, *, posted_by: Optional[str] = None) -> None:
        entry = self.get_entry(entry_id)
        if entry.status == EntryStatus.POSTED:
            raise ValidationError("Journal entry is already posted")

        self._journal.set_status(entry.id, EntryStatus.POSTED, updated_by=posted_by)
        logger.info(f"Journal entry {entry.entry_number} posted by {posted_by}")

    def delete_entry(self, entry_id: int, *, deleted_by: Optional[str] = None) -> None:
        entry = self.get_entry(entry_id)
        if entry.status != EntryStatus.DRAFT:
            raise ValidationError("Only draft journal entries can be deleted")

        self._journal.delete(entry.id, deleted_by=deleted_by)
        logger.info(f"Journal entry {entry.entry_number} deleted by {deleted_by}")

    def _parse(self, data: Mapping[str, Any]) -> JournalEntryInput:
        raw_items = data.get("items")
        if not data.get("entryNumber") or not data.get("date") or not data.get("status") or not raw_items:
            raise ValidationError(
                "Missing required fields. Entry number, date, status, and items are required."
            )
        if not isinstance(raw_items, list):
            raise ValidationError("Items must be a list")

        items = tuple(self._parse_item(i, n) for n, i in enumerate(raw_items, start=1))
        payload = JournalEntryInput(
            entry_number=require_non_empty(data.get("entryNumber"), "Entry number"),
            date=parse_date_field(data.get("date"), "Date"),
            status=require_enum(data.get("status"), EntryStatus, "status"),
            items=items,
            description=(data.get("description") or "").strip(),
            reference=(data.get("reference") or "").strip(),
        )
        ensure_balanced(payload)
        return payload

    def _parse_item(self, raw: Any, line_no: int) -> JournalItem:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Line {line_no}: item must be an object")

        try:
            account_id = int(raw.get("accountId"))
        except (TypeError, ValueError):
            raise ValidationError(f"Line {line_no}: account is required")
        if not self._accounts.get_by_id(account_id):
            raise ValidationError(f"Line {line_no}: account {account_id} does not exist")

        amount = parse_amount(raw.get("amount"), f"Line {line_no}: amount")
        if amount <= 0:
            raise ValidationError(f"Line {line_no}: amount must be greater than zero")

        return JournalItem(
            account_id=account_id,
            type=require_enum(raw.get("type"), EntryType, "entry type"),
            amount=amount,
            description=(raw.get("description") or "").strip(),
        )
