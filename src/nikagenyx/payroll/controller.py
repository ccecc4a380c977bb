from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import admin_required
from ..common.datetime_utils import now_local
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/mode", methods=["GET"], endpoint="payroll_mode")
    @admin_required
    def payroll_mode():
        return jsonify({"mode": container.payroll_service.get_mode().value})

    @app.route("/api/payroll/mode", methods=["POST"], endpoint="set_payroll_mode")
    @admin_required
    def set_payroll_mode():
        mode = container.payroll_service.set_mode(json_body().get("mode"))
        return jsonify({"message": "Payroll mode updated", "mode": mode.value})

    @app.route("/api/payroll/run", methods=["GET"], endpoint="run_payroll")
    @admin_required
    def run_payroll():
        today = now_local().date()
        year = request.args.get("year", today.year)
        month = request.args.get("month", today.month)
        results = container.payroll_service.run_payroll(year, month)
        return jsonify(
            {
                "year": int(year),
                "month": int(month),
                "mode": container.payroll_service.get_mode().value,
                "results": [r.to_dict() for r in results],
            }
        )
