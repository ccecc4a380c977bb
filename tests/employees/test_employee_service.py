from decimal import Decimal

import pyotp
import pytest

from nikagenyx.auth.service import AuthService, SessionUser
from nikagenyx.auth.tokens import TokenService
from nikagenyx.core.enums import Role
from nikagenyx.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from nikagenyx.employees.service import EmployeeService

ADMIN = SessionUser(emp_id="NGX000001", name="Nika Admin", role=Role.ADMIN)
ASHA = SessionUser(emp_id="NGX000002", name="Asha Rao", role=Role.EMPLOYEE)


@pytest.fixture
def service(employees_repo, mailer):
    auth = AuthService(employees_repo, TokenService("test-jwt-secret"), mailer)
    return EmployeeService(employees_repo, auth)


def test_employee_updates_own_profile(service):
    employee = service.update_profile(ASHA, "NGX000002", {"address": " 12 MG Road ", "department": "Ops"})

    assert employee.address == "12 MG Road"
    assert employee.department == "Ops"


def test_employee_cannot_update_someone_else(service):
    with pytest.raises(AuthorizationError):
        service.update_profile(ASHA, "NGX000001", {"address": "x"})


def test_admin_updates_any_profile(service):
    assert service.update_profile(ADMIN, "NGX000002", {"name": "Asha R."}).name == "Asha R."


def test_profile_update_ignores_unknown_fields(service):
    with pytest.raises(ValidationError):
        service.update_profile(ADMIN, "NGX000002", {"role": "admin", "pin_hash": "x"})


def test_phone_must_stay_unique(service):
    with pytest.raises(ConflictError):
        service.update_profile(ASHA, "NGX000002", {"phone": "9000000001"})


def test_profile_hides_secrets(service):
    profile = service.get_profile("NGX000001").profile()
    assert "pin_hash" not in profile and "mfa_secret" not in profile
    assert profile["mfa_enabled"] is True


def test_update_role(service, employees_repo):
    service.update_role("NGX000002", "admin")
    assert employees_repo.get_by_id("NGX000002").role == Role.ADMIN

    with pytest.raises(ValidationError):
        service.update_role("NGX000002", "owner")


def test_delete_employee_requires_admin_mfa(service, employees_repo):
    with pytest.raises(AuthenticationError):
        service.delete_employee("NGX000002", admin_id="NGX000001", mfa_token="abcdef")
    assert employees_repo.get_by_id("NGX000002") is not None

    service.delete_employee(
        "NGX000002", admin_id="NGX000001", mfa_token=pyotp.TOTP("JBSWY3DPEHPK3PXP").now()
    )
    assert employees_repo.get_by_id("NGX000002") is None


def test_admin_accounts_cannot_be_deleted(service):
    with pytest.raises(AuthorizationError):
        service.delete_employee("NGX000001", admin_id="NGX000001", mfa_token="123456")


def test_delete_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.delete_employee("NGX999999", admin_id="NGX000001", mfa_token="123456")


def test_admin_sets_pay_rates(service, employees_repo):
    employee = service.update_profile(ADMIN, "NGX000002", {"daily_rate": "950", "monthly_salary": 25000})

    assert employee.daily_rate == Decimal("950.00")
    assert employees_repo.get_by_id("NGX000002").monthly_salary == Decimal("25000.00")


def test_employee_cannot_change_own_pay_rate(service, employees_repo):
    with pytest.raises(AuthorizationError):
        service.update_profile(ASHA, "NGX000002", {"daily_rate": "5000"})
    assert employees_repo.get_by_id("NGX000002").daily_rate == Decimal("800.00")


def test_pay_rate_must_be_a_non_negative_amount(service):
    with pytest.raises(ValidationError):
        service.update_profile(ADMIN, "NGX000002", {"monthly_salary": "-1"})
    with pytest.raises(ValidationError):
        service.update_profile(ADMIN, "NGX000002", {"daily_rate": "lots"})
