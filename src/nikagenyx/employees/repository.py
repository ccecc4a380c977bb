from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, emp_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_ids(self, emp_ids: Sequence[str]) -> Sequence[Employee]:
        raise NotImplementedError

    def find_by_phone(self, phone: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_name_and_dob(self, name: str, dob: date) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, data: NewEmployee) -> None:
        raise NotImplementedError

    def update_profile(self, emp_id: str, fields: Mapping[str, object]) -> None:
        raise NotImplementedError

    def set_role(self, emp_id: str, role: Role) -> None:
        raise NotImplementedError

    def delete(self, emp_id: str) -> bool:
        raise NotImplementedError

    def set_failed_pin_attempts(self, emp_id: str, attempts: int) -> None:
        raise NotImplementedError

    def set_failed_mfa_attempts(self, emp_id: str, attempts: int) -> None:
        raise NotImplementedError

    def set_mfa_secret(self, emp_id: str, secret: str) -> None:
        """Store a new secret and reset the MFA failure counter."""

        raise NotImplementedError

    def set_reset_pin_ready(self, emp_id: str, ready: bool) -> None:
        raise NotImplementedError

    def set_pin(self, emp_id: str, pin_hash: str) -> None:
        """Store a new PIN hash, clearing the failure counter and the reset flag."""

        raise NotImplementedError
