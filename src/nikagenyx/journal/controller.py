from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.guards import admin_required
from ..common.http import json_body
from ..common.validators import parse_date_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/journal", methods=["GET"], endpoint="list_journal_entries")
    @admin_required
    def list_journal_entries():
        start = request.args.get("startDate")
        end = request.args.get("endDate")
        entries = container.journal_service.list_entries(
            start=parse_date_field(start, "Start date") if start else None,
            end=parse_date_field(end, "End date") if end else None,
            status=request.args.get("status"),
        )
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/journal", methods=["POST"], endpoint="create_journal_entry")
    @admin_required
    def create_journal_entry():
        entry_id = container.journal_service.create_entry(json_body(), created_by=g.current_user.emp_id)
        return jsonify({"message": "Journal entry created successfully", "id": entry_id}), 201

    @app.route("/api/journal/<int:entry_id>", methods=["GET"], endpoint="get_journal_entry")
    @admin_required
    def get_journal_entry(entry_id: int):
        return jsonify(container.journal_service.get_entry(entry_id).to_dict(with_items=True))

    @app.route("/api/journal/<int:entry_id>", methods=["PUT"], endpoint="update_journal_entry")
    @admin_required
    def update_journal_entry(entry_id: int):
        container.journal_service.update_entry(entry_id, json_body(), updated_by=g.current_user.emp_id)
        return jsonify({"message": "Journal entry updated successfully"})

    @app.route("/api/journal/<int:entry_id>/post", methods=["POST"], endpoint="post_journal_entry")
    @admin_required
    def post_journal_entry(entry_id: int):
        container.journal_service.post_entry(entry_id, posted_by=g.current_user.emp_id)
        return jsonify({"message": "Journal entry posted successfully"})

    @app.route("/api/journal/<int:entry_id>", methods=["DELETE"], endpoint="delete_journal_entry")
    @admin_required
    def delete_journal_entry(entry_id: int):
        container.journal_service.delete_entry(entry_id, deleted_by=g.current_user.emp_id)
        return jsonify({"message": "Journal entry deleted successfully"})
