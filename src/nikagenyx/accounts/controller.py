from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.guards import admin_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/accounts", methods=["GET"], endpoint="list_accounts")
    @admin_required
    def list_accounts():
        views = container.account_service.list_accounts()
        return jsonify([v.to_dict() for v in views])

    @app.route("/api/accounts", methods=["POST"], endpoint="create_account")
    @admin_required
    def create_account():
        account_id = container.account_service.create_account(json_body(), created_by=g.current_user.emp_id)
        return jsonify({"message": "Account created successfully", "id": account_id}), 201

    @app.route("/api/accounts/<int:account_id>", methods=["GET"], endpoint="get_account")
    @admin_required
    def get_account(account_id: int):
        return jsonify(container.account_service.get_account(account_id).to_dict())

    @app.route("/api/accounts/<int:account_id>", methods=["PUT"], endpoint="update_account")
    @admin_required
    def update_account(account_id: int):
        container.account_service.update_account(account_id, json_body())
        return jsonify({"message": "Account updated successfully"})

    @app.route("/api/accounts/<int:account_id>", methods=["DELETE"], endpoint="delete_account")
    @admin_required
    def delete_account(account_id: int):
        container.account_service.delete_account(account_id)
        return jsonify({"message": "Account deleted successfully"})
