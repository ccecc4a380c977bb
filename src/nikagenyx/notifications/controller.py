from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guards import admin_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications/bulk-email", methods=["POST"], endpoint="bulk_email")
    @admin_required
    def bulk_email():
        data = json_body()
        result = container.notification_service.send_bulk_email(
            data.get("sender"),
            data.get("subject"),
            data.get("body"),
            data.get("emp_ids") or data.get("employees"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/contact", methods=["POST"], endpoint="contact")
    def contact():
        data = json_body()
        container.notification_service.send_contact(data.get("name"), data.get("email"), data.get("message"))
        return jsonify({"message": "Message sent"})
