from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify, request

from ..auth.guards import admin_required, require_self_or_admin, token_required
from ..common.datetime_utils import now_local
from ..common.http import json_body
from ..common.validators import parse_date_field
from ..container import Container


def _own_or_admin(emp_id: str) -> None:
    require_self_or_admin(emp_id, "You can only access your own attendance")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock", methods=["POST"], endpoint="clock")
    @token_required
    def clock():
        data = json_body()
        emp_id = data.get("emp_id") or g.current_user.emp_id
        _own_or_admin(emp_id)
        result = container.attendance_service.clock(emp_id, data.get("type"))
        return jsonify(result.to_dict())

    @app.route("/api/attendance/status", methods=["GET"], endpoint="clock_status")
    @token_required
    def clock_status():
        emp_id = request.args.get("emp_id") or g.current_user.emp_id
        _own_or_admin(emp_id)
        return jsonify(container.attendance_service.clock_status(emp_id))

    @app.route("/api/attendance/calendar", methods=["GET"], endpoint="attendance_calendar")
    @admin_required
    def attendance_calendar():
        today = now_local().date()
        rows = container.attendance_service.monthly_calendar(
            request.args.get("year", today.year),
            request.args.get("month", today.month),
        )
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/attendance/<emp_id>", methods=["GET"], endpoint="employee_attendance")
    @token_required
    def employee_attendance(emp_id: str):
        _own_or_admin(emp_id)
        today = now_local().date()
        end = parse_date_field(request.args.get("end"), "End date", default=today)
        start = parse_date_field(request.args.get("start"), "Start date", default=end - timedelta(days=29))
        summary = container.attendance_service.employee_summary(emp_id, start=start, end=end)
        return jsonify(summary.to_dict())
