from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..auth.service import AuthService, SessionUser
from ..common.validators import parse_amount, require_enum, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import PAY_COLUMNS, PROFILE_COLUMNS, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: employee directory and admin maintenance."""

    def __init__(self, employees: EmployeeRepository, auth: AuthService):
        self._employees = employees
        self._auth = auth

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_profile(self, emp_id: str) -> Employee:
        employee = self._employees.get_by_id(emp_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def update_profile(self, current: SessionUser, emp_id: str, fields: Mapping[str, Any]) -> Employee:
        if current.role != Role.ADMIN and current.emp_id != emp_id:
            raise AuthorizationError("You can only update your own profile")
        self.get_profile(emp_id)

        changes: dict[str, Any] = {}
        for column in PROFILE_COLUMNS:
            if column not in fields:
                continue
            value = fields.get(column)
            value = str(value).strip() if value is not None else None
            if column == "name":
                value = require_non_empty(value, "Name")
            changes[column] = value or None
        for column in PAY_COLUMNS:
            if column not in fields:
                continue
            if current.role != Role.ADMIN:
                raise AuthorizationError("Only an admin can change pay rates")
            label = column.replace("_", " ").capitalize()
            rate = parse_amount(fields.get(column), label)
            if rate < 0:
                raise ValidationError(f"{label} cannot be negative")
            changes[column] = rate
        if not changes:
            raise ValidationError("No profile fields to update")

        phone = changes.get("phone")
        if phone:
            other = self._employees.find_by_phone(phone)
            if other and other.emp_id != emp_id:
                raise ConflictError("Phone number already registered")

        self._employees.update_profile(emp_id, changes)
        logger.info(f"Profile of {emp_id} updated by {current.emp_id}: {', '.join(sorted(changes))}")
        return self.get_profile(emp_id)

    def update_role(self, emp_id: str, role: Any) -> None:
        if not emp_id or not role:
            raise ValidationError("Missing required parameters")
        new_role = require_enum(role, Role, "role")
        self.get_profile(emp_id)
        self._employees.set_role(emp_id, new_role)
        logger.info(f"Role of {emp_id} set to {new_role.value}")

    def delete_employee(self, emp_id: str, *, admin_id: str, mfa_token: Optional[str]) -> None:
        """Remove an employee. The acting admin must confirm with a current TOTP code."""
        if not mfa_token:
            raise ValidationError("MFA token is required")
        employee = self.get_profile(emp_id)
        if employee.role == Role.ADMIN:
            raise AuthorizationError("Admin accounts cannot be deleted")

        self._auth.verify_mfa(admin_id, mfa_token)

        if not self._employees.delete(emp_id):
            raise NotFoundError("Employee not found")
        logger.info(f"Employee {emp_id} deleted by {admin_id}")
