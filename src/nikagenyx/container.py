from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import ModuleType
from typing import Optional

from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AccountService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.rules import AttendanceRules
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .auth.tokens import TokenService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.repository import InvoiceRepository
from .invoices.service import InvoiceService
from .journal.mysql_journal_repository import MySQLJournalRepository
from .journal.repository import JournalRepository
from .journal.service import JournalService
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import LedgerService
from .notifications.mailer import Mailer, SmtpMailer
from .notifications.service import NotificationService
from .payroll.factory import PayrollCalculatorFactory
from .payroll.mysql_payroll_mode_repository import MySQLPayrollModeRepository
from .payroll.repository import PayrollModeRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    journal_repo: JournalRepository
    ledger_repo: LedgerRepository
    invoices_repo: InvoiceRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    payroll_mode_repo: PayrollModeRepository
    mailer: Mailer

    account_service: AccountService
    journal_service: JournalService
    ledger_service: LedgerService
    invoice_service: InvoiceService
    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    notification_service: NotificationService


def wire_services(
    *,
    conn: Optional[DatabaseConnection],
    accounts_repo: AccountRepository,
    journal_repo: JournalRepository,
    ledger_repo: LedgerRepository,
    invoices_repo: InvoiceRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    payroll_mode_repo: PayrollModeRepository,
    mailer: Mailer,
    settings: ModuleType,
) -> Container:
    """Build the services on top of already constructed repositories."""
    tokens = TokenService(
        getattr(settings, "JWT_SECRET"),
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 12)),
    )
    rules = AttendanceRules.from_config(getattr(settings, "ATTENDANCE_RULES", {}))
    smtp_config = getattr(settings, "SMTP_CONFIG", {})

    auth_service = AuthService(
        employees_repo,
        tokens,
        mailer,
        mfa_issuer=getattr(settings, "MFA_ISSUER", "Nikagenyx"),
        mfa_max_attempts=getattr(settings, "MFA_MAX_FAILED_ATTEMPTS", 3),
        pin_max_attempts=getattr(settings, "PIN_MAX_FAILED_ATTEMPTS", 5),
    )

    return Container(
        conn=conn,
        accounts_repo=accounts_repo,
        journal_repo=journal_repo,
        ledger_repo=ledger_repo,
        invoices_repo=invoices_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        payroll_mode_repo=payroll_mode_repo,
        mailer=mailer,
        account_service=AccountService(accounts_repo),
        journal_service=JournalService(journal_repo, accounts_repo),
        ledger_service=LedgerService(ledger_repo, accounts_repo),
        invoice_service=InvoiceService(
            invoices_repo,
            accounts_repo,
            journal_repo,
            ledger_accounts=getattr(settings, "LEDGER_ACCOUNTS"),
        ),
        auth_service=auth_service,
        employee_service=EmployeeService(employees_repo, auth_service),
        attendance_service=AttendanceService(attendance_repo, employees_repo, rules=rules),
        payroll_service=PayrollService(
            payroll_mode_repo,
            attendance_repo,
            employees_repo,
            rules=rules,
            calculator_factory=PayrollCalculatorFactory(
                overtime_multiplier=Decimal(str(getattr(settings, "PAYROLL_OVERTIME_MULTIPLIER", "1.5")))
            ),
        ),
        notification_service=NotificationService(
            employees_repo,
            mailer,
            admin_address=smtp_config.get("admin_address"),
        ),
    )


def build_container(*, db_config: dict, settings: ModuleType) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_services(
        conn=conn,
        accounts_repo=MySQLAccountRepository(conn),
        journal_repo=MySQLJournalRepository(conn),
        ledger_repo=MySQLLedgerRepository(conn),
        invoices_repo=MySQLInvoiceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_mode_repo=MySQLPayrollModeRepository(conn),
        mailer=SmtpMailer(getattr(settings, "SMTP_CONFIG", {})),
        settings=settings,
    )
