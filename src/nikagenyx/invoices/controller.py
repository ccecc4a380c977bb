from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.guards import admin_required
from ..common.http import json_body
from ..common.validators import parse_date_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/invoices", methods=["GET"], endpoint="list_invoices")
    @admin_required
    def list_invoices():
        start = request.args.get("startDate")
        end = request.args.get("endDate")
        invoices = container.invoice_service.list_invoices(
            invoice_type=request.args.get("type"),
            status=request.args.get("status"),
            start=parse_date_field(start, "Start date") if start else None,
            end=parse_date_field(end, "End date") if end else None,
        )
        return jsonify([i.to_dict() for i in invoices])

    @app.route("/api/invoices", methods=["POST"], endpoint="create_invoice")
    @admin_required
    def create_invoice():
        invoice_id, journal_entry_id = container.invoice_service.create_invoice(
            json_body(), created_by=g.current_user.emp_id
        )
        return (
            jsonify(
                {
                    "message": "Invoice created successfully",
                    "id": invoice_id,
                    "journalEntryId": journal_entry_id,
                }
            ),
            201,
        )

    @app.route("/api/invoices/<int:invoice_id>", methods=["GET"], endpoint="get_invoice")
    @admin_required
    def get_invoice(invoice_id: int):
        return jsonify(container.invoice_service.get_invoice(invoice_id).to_dict(with_items=True))

    @app.route("/api/invoices/<int:invoice_id>/status", methods=["POST"], endpoint="update_invoice_status")
    @admin_required
    def update_invoice_status(invoice_id: int):
        container.invoice_service.update_status(
            invoice_id, json_body().get("status"), updated_by=g.current_user.emp_id
        )
        return jsonify({"message": "Invoice status updated successfully"})

    @app.route("/api/invoices/<int:invoice_id>", methods=["DELETE"], endpoint="delete_invoice")
    @admin_required
    def delete_invoice(invoice_id: int):
        container.invoice_service.delete_invoice(invoice_id, deleted_by=g.current_user.emp_id)
        return jsonify({"message": "Invoice deleted successfully"})
