from datetime import datetime, timedelta, timezone

import pytest

from nikagenyx.auth.tokens import TokenService
from nikagenyx.core.exceptions import AuthenticationError


def test_round_trip_claims():
    tokens = TokenService("secret")
    claims = tokens.decode(tokens.issue({"emp_id": "NGX000001", "role": "admin"}))
    assert claims["emp_id"] == "NGX000001"
    assert claims["role"] == "admin"


def test_expired_token_is_rejected():
    long_ago = datetime.now(timezone.utc) - timedelta(days=2)
    tokens = TokenService("secret", expires_hours=1, clock=lambda: long_ago)
    token = tokens.issue({"emp_id": "NGX000001"})

    with pytest.raises(AuthenticationError):
        tokens.decode(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService("other").issue({"emp_id": "NGX000001"})
    with pytest.raises(AuthenticationError):
        TokenService("secret").decode(token)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenService("")
