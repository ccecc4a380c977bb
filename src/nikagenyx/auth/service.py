from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import parse_date_field, require_non_empty, require_pin
from ..core.constants import EMPLOYEE_ID_PREFIX, PIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    LockedError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee, NewEmployee
from ..employees.repository import EmployeeRepository
from ..notifications.mailer import Mailer
from .mfa import MfaEnrollment, is_valid_secret, new_enrollment, verify_totp
from .tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Identity carried by a verified bearer token."""

    emp_id: str
    name: str
    role: Role

    def to_dict(self) -> dict:
        return {"emp_id": self.emp_id, "name": self.name, "role": self.role.value}


@dataclass(frozen=True)
class Registration:
    emp_id: str
    enrollment: MfaEnrollment

    def to_dict(self) -> dict:
        return {
            "emp_id": self.emp_id,
            "mfa_secret": self.enrollment.secret,
            "otpauth_url": self.enrollment.otpauth_url,
            "qr_code_url": self.enrollment.qr_code_url,
        }


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: SessionUser
    mfa_configured: bool

    def to_dict(self) -> dict:
        return {
            "status": "success",
            "token": self.token,
            "user": self.user.to_dict(),
            "mfa_configured": self.mfa_configured,
        }


class AuthService:
    """Use case: employee registration, PIN login, TOTP verification and PIN reset."""

    def __init__(
        self,
        employees: EmployeeRepository,
        tokens: TokenService,
        mailer: Mailer,
        *,
        mfa_issuer: str = "Nikagenyx",
        mfa_max_attempts: int = 3,
        pin_max_attempts: int = 5,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._tokens = tokens
        self._mailer = mailer
        self._mfa_issuer = mfa_issuer
        self._mfa_max = int(mfa_max_attempts)
        self._pin_max = int(pin_max_attempts)
        self._clock = clock

    # Registration

    def _next_emp_id(self) -> str:
        seq = int(self._clock().timestamp() * 1000) % 1_000_000
        for _ in range(1_000_000):
            emp_id = f"{EMPLOYEE_ID_PREFIX}{seq:06d}"
            if not self._employees.get_by_id(emp_id):
                return emp_id
            seq = (seq + 1) % 1_000_000
        raise ConflictError("No employee ids left")

    def begin_registration(self, first_name: Optional[str], last_name: Optional[str]) -> Registration:
        if not (first_name or "").strip() or not (last_name or "").strip():
            raise ValidationError("First and last name required.")
        full_name = f"{first_name.strip()} {last_name.strip()}"
        return Registration(
            emp_id=self._next_emp_id(),
            enrollment=new_enrollment(issuer=self._mfa_issuer, full_name=full_name),
        )

    def finalize_registration(self, data: Mapping[str, Any]) -> str:
        required = ("emp_id", "firstName", "lastName", "phone", "dob", "pin", "department", "mfa_secret", "mfa_code")
        if any(not str(data.get(k) or "").strip() for k in required):
            raise ValidationError("Missing required fields")

        emp_id = str(data["emp_id"]).strip()
        name = f"{str(data['firstName']).strip()} {str(data['lastName']).strip()}"
        phone = str(data["phone"]).strip()
        dob = parse_date_field(data["dob"], "Date of birth")
        pin = require_pin(str(data["pin"]), PIN_LENGTH)
        secret = str(data["mfa_secret"]).strip()
        if not is_valid_secret(secret):
            raise ValidationError("MFA secret must be base32")

        if self._employees.get_by_id(emp_id):
            raise ConflictError("Employee ID already registered")
        if self._employees.find_by_phone(phone):
            raise ConflictError("Phone number already registered")
        if self._employees.find_by_name_and_dob(name, dob):
            raise ConflictError("An employee with the same name and date of birth already exists")
        if not verify_totp(secret, str(data["mfa_code"])):
            raise AuthenticationError("Invalid MFA code")

        self._employees.create(
            NewEmployee(
                emp_id=emp_id,
                name=name,
                phone=phone,
                dob=dob,
                department=require_non_empty(data.get("department"), "Department"),
                pin_hash=generate_password_hash(pin),
                mfa_secret=secret,
                role=Role.EMPLOYEE,
                email=(data.get("email") or "").strip() or None,
                address=(data.get("address") or "").strip() or None,
            )
        )
        logger.info(f"Employee {emp_id} registered ({name})")
        return emp_id

    # Login and session

    def login(self, emp_id: Optional[str], pin: Optional[str]) -> LoginResult:
        if not emp_id or not pin:
            raise ValidationError("Employee ID and PIN are required")

        employee = self._employees.get_by_id(str(emp_id).strip())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid login")
        if employee.failed_pin_attempts >= self._pin_max:
            raise LockedError("Account locked after too many failed PIN attempts. Reset your PIN.")

        if not _pin_matches(employee.pin_hash, str(pin)):
            attempts = employee.failed_pin_attempts + 1
            self._employees.set_failed_pin_attempts(employee.emp_id, attempts)
            if attempts >= self._pin_max:
                logger.warning(f"Employee {employee.emp_id} locked after {attempts} failed PIN attempts")
                raise LockedError("Account locked after too many failed PIN attempts. Reset your PIN.")
            raise AuthenticationError("Invalid login")

        if employee.failed_pin_attempts:
            self._employees.set_failed_pin_attempts(employee.emp_id, 0)

        user = SessionUser(emp_id=employee.emp_id, name=employee.name, role=employee.role)
        token = self._tokens.issue({"emp_id": user.emp_id, "role": user.role.value, "name": user.name})
        logger.info(f"Employee {employee.emp_id} logged in")
        return LoginResult(token=token, user=user, mfa_configured=bool(employee.mfa_secret))

    def verify_session(self, token: Optional[str]) -> SessionUser:
        if not token:
            raise AuthenticationError("Missing bearer token")
        claims = self._tokens.decode(token)
        emp_id = claims.get("emp_id")
        role = claims.get("role")
        if not emp_id or not role:
            raise AuthenticationError("Invalid token payload")
        try:
            role = Role(role)
        except ValueError:
            raise AuthenticationError("Invalid token payload")
        return SessionUser(emp_id=str(emp_id), name=str(claims.get("name") or ""), role=role)

    # MFA

    def verify_mfa(self, emp_id: Optional[str], token: Optional[str]) -> None:
        if not emp_id or not token:
            raise ValidationError("Missing emp_id or token")

        employee = self._require(emp_id)
        if not employee.mfa_secret:
            raise AuthorizationError("MFA not setup for this employee")
        if employee.failed_mfa_attempts >= self._mfa_max:
            raise LockedError("Account temporarily locked due to too many failed MFA attempts")

        if not verify_totp(employee.mfa_secret, token):
            attempts = employee.failed_mfa_attempts + 1
            self._employees.set_failed_mfa_attempts(employee.emp_id, attempts)
            if attempts >= self._mfa_max:
                logger.warning(f"Employee {employee.emp_id} locked after {attempts} failed MFA attempts")
            raise AuthenticationError("Invalid MFA token")

        if employee.failed_mfa_attempts:
            self._employees.set_failed_mfa_attempts(employee.emp_id, 0)

    def reset_mfa(self, emp_id: Optional[str]) -> MfaEnrollment:
        if not emp_id:
            raise ValidationError("Missing emp_id")

        employee = self._require(emp_id)
        if employee.failed_mfa_attempts < self._mfa_max:
            raise AuthorizationError(
                f"MFA reset not allowed. Less than {self._mfa_max} failed attempts."
            )

        enrollment = new_enrollment(issuer=self._mfa_issuer, full_name=employee.name)
        self._employees.set_mfa_secret(employee.emp_id, enrollment.secret)
        logger.info(f"MFA secret reset for {employee.emp_id}")
        return enrollment

    # PIN reset

    def forgot_pin(self, emp_id: Optional[str]) -> None:
        if not emp_id:
            raise ValidationError("Missing emp_id")

        employee = self._require(emp_id)
        self._employees.set_reset_pin_ready(employee.emp_id, True)

        if not employee.email:
            logger.warning(f"PIN reset requested for {employee.emp_id} but no email is on file")
            return
        try:
            self._mailer.send(
                to=employee.email,
                subject="Nikagenyx PIN reset",
                body=(
                    f"Hello {employee.name},\n\n"
                    "A PIN reset was requested for your account. "
                    f"Open the app and choose a new {PIN_LENGTH}-digit PIN.\n\n"
                    "If you did not request this, contact your administrator."
                ),
            )
        except Exception as e:
            # reset flag stays set
            logger.error(f"Failed to send PIN reset mail to {employee.emp_id}: {e}", exc_info=True)

    def check_reset_pin(self, emp_id: Optional[str]) -> bool:
        if not emp_id:
            raise ValidationError("Missing emp_id")
        return self._require(emp_id).reset_pin_ready

    def confirm_pin_reset(self, emp_id: Optional[str], new_pin: Optional[str]) -> None:
        if not emp_id:
            raise ValidationError("Missing emp_id")

        employee = self._require(emp_id)
        if not employee.reset_pin_ready:
            raise AuthorizationError("PIN reset was not requested")
        pin = require_pin(new_pin, PIN_LENGTH)

        self._employees.set_pin(employee.emp_id, generate_password_hash(pin))
        logger.info(f"PIN reset completed for {employee.emp_id}")

    def _require(self, emp_id: str) -> Employee:
        employee = self._employees.get_by_id(str(emp_id).strip())
        if not employee:
            raise NotFoundError("Employee not found")
        return employee


def _pin_matches(pin_hash: str, pin: str) -> bool:
    try:
        return check_password_hash(pin_hash, pin)
    except ValueError:
        # placeholder or corrupted hashes
        return False
