"""Settings shared by every environment.

Environment modules import everything from here and override what differs.
"""
import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Bearer sessions
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "12"))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "nikagenyx_db"),
}

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# MFA / PIN lockout
MFA_ISSUER = os.getenv("MFA_ISSUER", "Nikagenyx")
MFA_MAX_FAILED_ATTEMPTS = 3
PIN_MAX_FAILED_ATTEMPTS = 5

SMTP_CONFIG = {
    "host": os.getenv("SMTP_HOST", "smtpout.secureserver.net"),
    "port": int(os.getenv("SMTP_PORT", "465")),
    "use_ssl": bool(int(os.getenv("SMTP_USE_SSL", "1"))),
    "user": os.getenv("SMTP_USER", ""),
    "password": os.getenv("SMTP_PASSWORD", ""),
    "admin_address": os.getenv("ADMIN_EMAIL", "hr@nikagenyx.com"),
    "sender_name": os.getenv("SMTP_SENDER_NAME", "Nikagenyx HR"),
}

# Control accounts (by code) that invoices post to.
LEDGER_ACCOUNTS = {
    "accounts_receivable": os.getenv("ACCOUNTS_RECEIVABLE_CODE", "1200"),
    "accounts_payable": os.getenv("ACCOUNTS_PAYABLE_CODE", "2000"),
    "tax_payable": os.getenv("TAX_PAYABLE_CODE", "2200"),
    "sales": os.getenv("SALES_CODE", "4000"),
    "purchases": os.getenv("PURCHASES_CODE", "5000"),
}

ATTENDANCE_RULES = {
    "work_start": "09:00:00",
    "work_end": "18:00:00",
    "enforce_working_hours": bool(int(os.getenv("ENFORCE_WORKING_HOURS", "0"))),
    "present_hours": 7,
    "half_day_hours": 5,
}

PAYROLL_OVERTIME_MULTIPLIER = os.getenv("PAYROLL_OVERTIME_MULTIPLIER", "1.5")
