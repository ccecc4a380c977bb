from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.guards import admin_required, require_self_or_admin, token_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        return jsonify([e.profile() for e in container.employee_service.list_employees()])

    @app.route("/api/employees/<emp_id>", methods=["GET"], endpoint="get_employee_profile")
    @token_required
    def get_employee_profile(emp_id: str):
        require_self_or_admin(emp_id, "You can only view your own profile")
        return jsonify(container.employee_service.get_profile(emp_id).profile())

    @app.route("/api/employees/<emp_id>", methods=["PUT"], endpoint="update_employee_profile")
    @token_required
    def update_employee_profile(emp_id: str):
        employee = container.employee_service.update_profile(g.current_user, emp_id, json_body())
        return jsonify({"message": "Profile updated successfully", "employee": employee.profile()})

    @app.route("/api/employees/<emp_id>/role", methods=["POST"], endpoint="update_employee_role")
    @admin_required
    def update_employee_role(emp_id: str):
        container.employee_service.update_role(emp_id, json_body().get("new_role"))
        return jsonify({"message": "Role updated successfully"})

    @app.route("/api/employees/<emp_id>/delete", methods=["POST"], endpoint="delete_employee")
    @admin_required
    def delete_employee(emp_id: str):
        container.employee_service.delete_employee(
            emp_id,
            admin_id=g.current_user.emp_id,
            mfa_token=json_body().get("mfa_token"),
        )
        return jsonify({"message": "Employee deleted successfully"})
