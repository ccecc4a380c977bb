from datetime import date, time

import pytest

from nikagenyx.attendance.model import AttendanceRecord
from nikagenyx.auth.tokens import TokenService
from nikagenyx.container import wire_services
from nikagenyx.main import create_app


@pytest.fixture
def container(
    accounts_repo,
    journal_repo,
    ledger_repo,
    invoices_repo,
    employees_repo,
    attendance_repo,
    payroll_modes,
    mailer,
    settings,
):
    return wire_services(
        conn=None,
        accounts_repo=accounts_repo,
        journal_repo=journal_repo,
        ledger_repo=ledger_repo,
        invoices_repo=invoices_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_mode_repo=payroll_modes,
        mailer=mailer,
        settings=settings,
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _bearer(emp_id, role, name="Someone"):
    token = TokenService("test-jwt-secret").issue({"emp_id": emp_id, "role": role, "name": name})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin():
    return _bearer("NGX000001", "admin", "Nika Admin")


@pytest.fixture
def employee():
    return _bearer("NGX000002", "employee", "Asha Rao")


def test_login_and_session(client):
    resp = client.post("/api/auth/login", json={"emp_id": "NGX000002", "pin": "4321"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]

    resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["emp_id"] == "NGX000002"


def test_bad_login_is_401_json(client):
    resp = client.post("/api/auth/login", json={"emp_id": "NGX000002", "pin": "0000"})
    assert resp.status_code == 401
    assert "error" in resp.get_json()


def test_accounting_routes_need_admin(client, employee):
    assert client.get("/api/accounts").status_code == 401
    assert client.get("/api/accounts", headers=employee).status_code == 403


def test_account_crud(client, admin):
    resp = client.post("/api/accounts", json={"code": "1010", "name": "Petty Cash", "type": "Asset"}, headers=admin)
    assert resp.status_code == 201
    account_id = resp.get_json()["id"]

    detail = client.get(f"/api/accounts/{account_id}", headers=admin).get_json()
    assert detail["code"] == "1010"
    assert detail["balance"] == 0

    assert client.post("/api/accounts", json={"code": "1010", "name": "Dup", "type": "Asset"}, headers=admin).status_code == 409
    assert client.delete(f"/api/accounts/{account_id}", headers=admin).status_code == 200
    assert client.get(f"/api/accounts/{account_id}", headers=admin).status_code == 404


def test_journal_post_and_trial_balance(client, admin):
    resp = client.post(
        "/api/journal",
        json={
            "entryNumber": "JE-100",
            "date": "2025-03-01",
            "status": "draft",
            "items": [
                {"accountId": 1, "type": "debit", "amount": 5000},
                {"accountId": 5, "type": "credit", "amount": 5000},
            ],
        },
        headers=admin,
    )
    assert resp.status_code == 201
    entry_id = resp.get_json()["id"]

    tb = client.get("/api/ledger/trial-balance?endDate=2025-03-31", headers=admin).get_json()
    assert tb["rows"] == []

    assert client.post(f"/api/journal/{entry_id}/post", headers=admin).status_code == 200
    tb = client.get("/api/ledger/trial-balance?endDate=2025-03-31", headers=admin).get_json()
    assert tb["totalDebit"] == tb["totalCredit"] == 5000
    assert tb["balanced"] is True

    ledger = client.get("/api/ledger/account?accountId=1&startDate=2025-01-01&endDate=2025-03-31", headers=admin).get_json()
    assert ledger["entries"][0]["runningBalance"] == 5000
    assert ledger["entries"][0]["date"] == "2025-03-01"


def test_unbalanced_journal_is_400(client, admin):
    resp = client.post(
        "/api/journal",
        json={
            "entryNumber": "JE-101",
            "date": "2025-03-01",
            "status": "draft",
            "items": [
                {"accountId": 1, "type": "debit", "amount": 10},
                {"accountId": 5, "type": "credit", "amount": 9},
            ],
        },
        headers=admin,
    )
    assert resp.status_code == 400
    assert "balanced" in resp.get_json()["error"]


def test_invoice_with_auto_post(client, admin):
    resp = client.post(
        "/api/invoices",
        json={
            "invoiceNumber": "INV-0001",
            "invoiceType": "sale",
            "status": "sent",
            "date": "2025-03-03",
            "dueDate": "2025-03-18",
            "partyName": "Lotus Traders",
            "autoPost": True,
            "items": [{"description": "Consulting", "quantity": 1, "unitPrice": 1000, "taxRate": 18}],
        },
        headers=admin,
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["journalEntryId"]

    invoice = client.get(f"/api/invoices/{body['id']}", headers=admin).get_json()
    assert invoice["total"] == 1180
    assert invoice["items"][0]["taxAmount"] == 180


def test_employee_reads_own_profile_only(client, employee):
    assert client.get("/api/employees/NGX000002", headers=employee).status_code == 200
    assert client.get("/api/employees/NGX000001", headers=employee).status_code == 403


def test_clock_in_over_http(client, employee):
    resp = client.post("/api/attendance/clock", json={"type": "in"}, headers=employee)
    assert resp.status_code == 200
    assert resp.get_json()["type"] == "in"

    status = client.get("/api/attendance/status", headers=employee).get_json()
    assert status["last_action"] == "in"


def test_employee_cannot_read_other_attendance(client, employee):
    assert client.get("/api/attendance/NGX000001", headers=employee).status_code == 403


def test_payroll_mode_and_run(client, admin):
    assert client.get("/api/payroll/mode", headers=admin).get_json()["mode"] == "freelance"
    assert client.post("/api/payroll/mode", json={"mode": "fulltime"}, headers=admin).status_code == 200

    run = client.get("/api/payroll/run?year=2025&month=2", headers=admin).get_json()
    assert run["mode"] == "fulltime"
    assert {r["emp_id"] for r in run["results"]} == {"NGX000001", "NGX000002"}


def test_contact_form_is_public(client, mailer):
    resp = client.post("/api/contact", json={"name": "Meera", "email": "meera@example.com", "message": "Hello"})
    assert resp.status_code == 200
    assert mailer.sent[0]["to"] == "hr@example.com"


def test_bulk_email_over_http(client, admin, mailer):
    resp = client.post(
        "/api/notifications/bulk-email",
        json={"sender": "HR", "subject": "Payday", "body": "Salaries are out.", "emp_ids": ["NGX000002"]},
        headers=admin,
    )
    assert resp.get_json()["sent"] == 1


def test_wrong_method_is_405_json(client):
    resp = client.put("/api/auth/login")
    assert resp.status_code == 405
    assert "error" in resp.get_json()


def test_non_object_body_is_400(client):
    resp = client.post("/api/auth/login", json=["NGX000002"])
    assert resp.status_code == 400


def test_mfa_routes_need_a_session(client):
    assert client.post("/api/auth/mfa/verify", json={"emp_id": "NGX000001", "token": "000000"}).status_code == 401
    assert client.post("/api/auth/mfa/reset", json={"emp_id": "NGX000001"}).status_code == 401


def test_employee_cannot_touch_another_employees_mfa(client, employee, employees_repo):
    employees_repo.set_failed_mfa_attempts("NGX000001", 3)

    resp = client.post("/api/auth/mfa/reset", json={"emp_id": "NGX000001"}, headers=employee)
    assert resp.status_code == 403
    resp = client.post("/api/auth/mfa/verify", json={"emp_id": "NGX000001", "token": "000000"}, headers=employee)
    assert resp.status_code == 403
    assert employees_repo.get_by_id("NGX000001").mfa_secret == "JBSWY3DPEHPK3PXP"


def test_locked_employee_resets_own_mfa(client, employee, employees_repo):
    employees_repo.set_failed_mfa_attempts("NGX000002", 3)

    resp = client.post("/api/auth/mfa/reset", json={}, headers=employee)
    assert resp.status_code == 200
    assert employees_repo.get_by_id("NGX000002").mfa_secret == resp.get_json()["mfa_secret"]


def test_registration_with_malformed_secret_is_400(client):
    resp = client.post(
        "/api/auth/register/finalize",
        json={
            "emp_id": "NGX123456",
            "firstName": "Ravi",
            "lastName": "Kumar",
            "phone": "9123456789",
            "dob": "1990-07-01",
            "pin": "2468",
            "department": "Sales",
            "mfa_secret": "not-base32!!",
            "mfa_code": "123456",
        },
    )
    assert resp.status_code == 400
    assert "base32" in resp.get_json()["error"]


def test_oversized_journal_amount_is_400(client, admin):
    resp = client.post(
        "/api/journal",
        json={
            "entryNumber": "JE-102",
            "date": "2025-03-01",
            "status": "draft",
            "items": [
                {"accountId": 1, "type": "debit", "amount": "1e30"},
                {"accountId": 5, "type": "credit", "amount": "1e30"},
            ],
        },
        headers=admin,
    )
    assert resp.status_code == 400


def test_oversized_invoice_quantity_is_400(client, admin):
    resp = client.post(
        "/api/invoices",
        json={
            "invoiceNumber": "INV-0002",
            "invoiceType": "sale",
            "status": "draft",
            "date": "2025-03-03",
            "dueDate": "2025-03-18",
            "partyName": "Lotus Traders",
            "items": [{"description": "Bulk", "quantity": "1e30", "unitPrice": 1}],
        },
        headers=admin,
    )
    assert resp.status_code == 400


def test_admin_sets_pay_rate_used_by_payroll(client, admin, attendance_repo):
    resp = client.put("/api/employees/NGX000002", json={"daily_rate": 1000}, headers=admin)
    assert resp.status_code == 200
    assert resp.get_json()["employee"]["daily_rate"] == 1000

    attendance_repo.add(
        AttendanceRecord(
            emp_id="NGX000002",
            work_date=date(2025, 3, 3),
            clock_in=time(9, 0),
            clock_out=time(17, 0),
            work_duration_seconds=8 * 3600,
        )
    )
    run = client.get("/api/payroll/run?year=2025&month=3", headers=admin).get_json()
    asha = next(r for r in run["results"] if r["emp_id"] == "NGX000002")
    assert asha["total_pay"] == 1000


def test_employee_cannot_raise_own_pay_rate(client, employee):
    resp = client.put("/api/employees/NGX000002", json={"monthly_salary": 99000}, headers=employee)
    assert resp.status_code == 403
