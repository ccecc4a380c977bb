from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


class ApiJSONProvider(DefaultJSONProvider):
    """JSON encoding for money and calendar values.

    Dates go out as ISO strings (not Flask's RFC 822 default) and Decimals as
    numbers, which is what the front end expects.
    """

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, (datetime, date, time)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error(f"Unhandled error on {request.method} {request.path}: {e}", exc_info=True)
        if app.config.get("DEBUG"):
            return jsonify({"error": "Internal server error", "detail": str(e)}), 500
        return jsonify({"error": "Internal server error"}), 500
