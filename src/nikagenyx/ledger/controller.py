from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..auth.guards import admin_required
from ..common.validators import parse_date_field, require_enum
from ..container import Container
from ..core.enums import AccountType
from ..core.exceptions import ValidationError


def _date_arg(name: str, label: str):
    value = request.args.get(name)
    return parse_date_field(value, label) if value else None


def _account_id_arg() -> Optional[int]:
    value = request.args.get("accountId")
    if not value or value == "all":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError("Account ID must be a number")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/ledger", methods=["GET"], endpoint="general_ledger")
    @admin_required
    def general_ledger():
        account_type = request.args.get("accountType")
        ledgers = container.ledger_service.general_ledger(
            start=_date_arg("startDate", "Start date"),
            end=_date_arg("endDate", "End date"),
            account_id=_account_id_arg(),
            account_type=(
                require_enum(account_type, AccountType, "account type")
                if account_type and account_type != "all"
                else None
            ),
        )
        return jsonify([led.to_dict() for led in ledgers])

    @app.route("/api/ledger/account", methods=["GET"], endpoint="account_ledger")
    @admin_required
    def account_ledger():
        ledger = container.ledger_service.account_ledger(
            _account_id_arg(),
            start=_date_arg("startDate", "Start date"),
            end=_date_arg("endDate", "End date"),
        )
        return jsonify(ledger.to_dict())

    @app.route("/api/ledger/trial-balance", methods=["GET"], endpoint="trial_balance")
    @admin_required
    def trial_balance():
        tb = container.ledger_service.trial_balance(_date_arg("endDate", "End date"))
        return jsonify(tb.to_dict())

    @app.route("/api/reports/income-statement", methods=["GET"], endpoint="income_statement")
    @admin_required
    def income_statement():
        statement = container.ledger_service.income_statement(
            start=_date_arg("startDate", "Start date"),
            end=_date_arg("endDate", "End date"),
        )
        return jsonify(statement.to_dict())

    @app.route("/api/reports/balance-sheet", methods=["GET"], endpoint="balance_sheet")
    @admin_required
    def balance_sheet():
        sheet = container.ledger_service.balance_sheet(_date_arg("asOf", "As-of date") or _date_arg("endDate", "End date"))
        return jsonify(sheet.to_dict())
