from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

from jose import JWTError, jwt

from ..core.exceptions import AuthenticationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issue and verify HS256 session tokens."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        expires_hours: int = 12,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(hours=int(expires_hours))
        self._clock = clock

    def issue(self, claims: Mapping[str, Any]) -> str:
        payload = dict(claims)
        payload["exp"] = self._clock() + self._expires
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")
