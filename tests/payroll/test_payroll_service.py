from dataclasses import replace
from datetime import date, time
from decimal import Decimal

import pytest

from nikagenyx.attendance.model import AttendanceRecord
from nikagenyx.core.enums import PayrollMode
from nikagenyx.core.exceptions import ValidationError
from nikagenyx.payroll.service import PayrollService


@pytest.fixture
def service(payroll_modes, attendance_repo, employees_repo):
    return PayrollService(payroll_modes, attendance_repo, employees_repo)


def _day(emp_id, day, hours):
    return AttendanceRecord(
        emp_id=emp_id,
        work_date=day,
        clock_in=time(8, 0),
        clock_out=time(8 + hours, 0),
        work_duration_seconds=hours * 3600,
    )


def test_mode_defaults_to_freelance(service):
    assert service.get_mode() == PayrollMode.FREELANCE


def test_set_mode(service, payroll_modes):
    assert service.set_mode("fulltime") == PayrollMode.FULLTIME
    assert payroll_modes.mode == PayrollMode.FULLTIME
    with pytest.raises(ValidationError):
        service.set_mode("hourly")
    with pytest.raises(ValidationError):
        service.set_mode(None)


def test_run_payroll_freelance_from_attendance(service, attendance_repo):
    attendance_repo.add(_day("NGX000002", date(2025, 3, 3), 10))
    attendance_repo.add(_day("NGX000002", date(2025, 3, 4), 6))
    attendance_repo.add(_day("NGX000002", date(2025, 4, 1), 8))

    results = {r.emp_id: r for r in service.run_payroll(2025, 3)}

    asha = results["NGX000002"]
    assert (asha.days_present, asha.days_half) == (1, 1)
    assert asha.overtime_hours == Decimal("2.00")
    assert asha.total_pay == Decimal("800") + Decimal("400") + Decimal("300")
    assert results["NGX000001"].total_pay == Decimal("0.00")


def test_run_payroll_fulltime_counts_missing_weekdays(service, payroll_modes):
    payroll_modes.mode = PayrollMode.FULLTIME
    results = {r.emp_id: r for r in service.run_payroll("2025", "3")}

    asha = results["NGX000002"]
    assert asha.days_absent == 21
    assert asha.total_pay == Decimal("0.00")


def test_run_payroll_skips_inactive_employees(service, employees_repo):
    employees_repo.add(replace(employees_repo.get_by_id("NGX000002"), is_active=False))
    assert [r.emp_id for r in service.run_payroll(2025, 3)] == ["NGX000001"]


def test_run_payroll_validates_period(service):
    with pytest.raises(ValidationError):
        service.run_payroll(2025, 0)
    with pytest.raises(ValidationError):
        service.run_payroll("soon", 3)
