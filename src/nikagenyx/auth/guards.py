from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError

EXTENSION_KEY = "nikagenyx"


def current_container():
    return current_app.extensions[EXTENSION_KEY]


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")
    return token.strip()


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.current_user = current_container().auth_service.verify_session(bearer_token())
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_container().auth_service.verify_session(bearer_token())
        if user.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        g.current_user = user
        return view(*args, **kwargs)

    return wrapper


def require_self_or_admin(emp_id: str, message: str = "You can only act on your own account") -> None:
    """Call inside a guarded view; admins may act on any employee."""
    user = g.current_user
    if user.role != Role.ADMIN and user.emp_id != emp_id:
        raise AuthorizationError(message)
