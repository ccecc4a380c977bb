from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .mailer import Mailer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkEmailResult:
    sent: int
    failed: tuple[dict, ...]

    def to_dict(self) -> dict:
        return {
            "message": f"Email sent to {self.sent} employee(s)",
            "sent": self.sent,
            "failed": len(self.failed),
            "failures": list(self.failed),
        }


class NotificationService:
    def __init__(self, employees: EmployeeRepository, mailer: Mailer, *, admin_address: Optional[str] = None):
        self._employees = employees
        self._mailer = mailer
        self._admin_address = admin_address

    def send_bulk_email(self, sender: Any, subject: Any, body: Any, emp_ids: Any) -> BulkEmailResult:
        if not sender or not subject or not body or not emp_ids:
            raise ValidationError("Sender, subject, body and at least one employee are required")
        if isinstance(emp_ids, str) or not isinstance(emp_ids, Sequence):
            raise ValidationError("Employees must be a list of employee IDs")

        requested = [str(e) for e in emp_ids]
        found = {e.emp_id: e for e in self._employees.list_by_ids(requested)}

        sent = 0
        failed = []
        for emp_id in requested:
            employee = found.get(emp_id)
            if employee is None:
                failed.append({"emp_id": emp_id, "reason": "Employee not found"})
                continue
            if not employee.email:
                failed.append({"emp_id": emp_id, "reason": "No email on file"})
                continue
            try:
                self._mailer.send(to=employee.email, subject=str(subject), body=str(body), sender_name=str(sender))
            except Exception as e:
                logger.error(f"Bulk mail to {emp_id} failed: {e}", exc_info=True)
                failed.append({"emp_id": emp_id, "reason": "Delivery failed"})
                continue
            sent += 1

        logger.info(f"Bulk mail '{subject}': {sent} sent, {len(failed)} failed")
        return BulkEmailResult(sent=sent, failed=tuple(failed))

    def send_contact(self, name: Any, email: Any, message: Any) -> None:
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email")
        message = require_non_empty(message, "Message")
        if "@" not in email:
            raise ValidationError("Email is not valid")
        if not self._admin_address:
            raise ValidationError("Contact address is not configured")

        self._mailer.send(
            to=self._admin_address,
            subject=f"Contact form: {name}",
            body=f"From: {name} <{email}>\n\n{message}",
            sender_name=name,
            reply_to=email,
        )
        logger.info(f"Contact message from {email} relayed")
