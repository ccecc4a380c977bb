from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import json_body
from ..container import Container
from .guards import require_self_or_admin, token_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="begin_registration")
    def begin_registration():
        data = json_body()
        registration = container.auth_service.begin_registration(data.get("firstName"), data.get("lastName"))
        return jsonify(registration.to_dict())

    @app.route("/api/auth/register/finalize", methods=["POST"], endpoint="finalize_registration")
    def finalize_registration():
        emp_id = container.auth_service.finalize_registration(json_body())
        return jsonify({"message": "Registration complete", "emp_id": emp_id}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        result = container.auth_service.login(data.get("emp_id") or data.get("empId"), data.get("pin"))
        return jsonify(result.to_dict())

    @app.route("/api/auth/session", methods=["GET"], endpoint="verify_session")
    @token_required
    def verify_session():
        return jsonify({"valid": True, "user": g.current_user.to_dict()})

    @app.route("/api/auth/mfa/verify", methods=["POST"], endpoint="verify_mfa")
    @token_required
    def verify_mfa():
        data = json_body()
        emp_id = data.get("emp_id") or g.current_user.emp_id
        require_self_or_admin(emp_id, "You can only verify MFA for your own account")
        container.auth_service.verify_mfa(emp_id, data.get("token"))
        return jsonify({"message": "MFA verified successfully"})

    @app.route("/api/auth/mfa/reset", methods=["POST"], endpoint="reset_mfa")
    @token_required
    def reset_mfa():
        emp_id = json_body().get("emp_id") or g.current_user.emp_id
        require_self_or_admin(emp_id, "You can only reset MFA for your own account")
        enrollment = container.auth_service.reset_mfa(emp_id)
        return jsonify(
            {
                "message": "MFA reset. Please reconfigure MFA.",
                "mfa_secret": enrollment.secret,
                "otpauth_url": enrollment.otpauth_url,
                "qr_code_url": enrollment.qr_code_url,
            }
        )

    @app.route("/api/auth/pin/forgot", methods=["POST"], endpoint="forgot_pin")
    def forgot_pin():
        container.auth_service.forgot_pin(json_body().get("emp_id"))
        return jsonify({"message": "Reset email sent."})

    @app.route("/api/auth/pin/status", methods=["GET"], endpoint="check_reset_pin")
    def check_reset_pin():
        ready = container.auth_service.check_reset_pin(request.args.get("emp_id"))
        return jsonify({"reset_pin_ready": ready})

    @app.route("/api/auth/pin/confirm", methods=["POST"], endpoint="confirm_pin_reset")
    def confirm_pin_reset():
        data = json_body()
        container.auth_service.confirm_pin_reset(data.get("emp_id"), data.get("new_pin"))
        return jsonify({"message": "PIN updated successfully"})
