from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import Role

# Columns an employee (or admin) may edit through the profile endpoint.
PROFILE_COLUMNS = ("name", "phone", "email", "address", "department")
# Pay rates used by payroll; admin only.
PAY_COLUMNS = ("daily_rate", "monthly_salary")


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account.

    Note: plain data only, no database access here. `pin_hash` and
    `mfa_secret` never leave the service layer.
    """

    emp_id: str
    name: str
    role: Role
    pin_hash: str
    department: Optional[str] = None
    phone: Optional[str] = None
    dob: Optional[date] = None
    email: Optional[str] = None
    address: Optional[str] = None
    mfa_secret: Optional[str] = None
    failed_mfa_attempts: int = 0
    failed_pin_attempts: int = 0
    reset_pin_ready: bool = False
    is_active: bool = True
    daily_rate: Decimal = Decimal("0.00")
    monthly_salary: Decimal = Decimal("0.00")

    def profile(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "name": self.name,
            "role": self.role.value,
            "department": self.department,
            "phone": self.phone,
            "dob": self.dob,
            "email": self.email,
            "address": self.address,
            "is_active": self.is_active,
            "mfa_enabled": bool(self.mfa_secret),
            "daily_rate": self.daily_rate,
            "monthly_salary": self.monthly_salary,
        }


@dataclass(frozen=True)
class NewEmployee:
    emp_id: str
    name: str
    phone: str
    dob: date
    department: str
    pin_hash: str
    mfa_secret: str
    role: Role = Role.EMPLOYEE
    email: Optional[str] = None
    address: Optional[str] = None
