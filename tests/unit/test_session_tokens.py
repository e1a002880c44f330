"""Bearer session tokens carry the account id and the session id."""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import get_settings
from app.infrastructure.security.jwt import create_session_token, new_session_id, verify_token


def test_round_trip() -> None:
    token = create_session_token("acc1")
    claims = verify_token(token.access_token)
    assert claims.account_id == "acc1"
    assert claims.sid == token.sid


def test_existing_sid_is_kept() -> None:
    sid = new_session_id()
    assert verify_token(create_session_token("acc1", sid=sid).access_token).sid == sid


def test_each_token_gets_its_own_session() -> None:
    assert create_session_token("acc1").sid != create_session_token("acc1").sid


def test_expired_token() -> None:
    token = create_session_token("acc1", expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError):
        verify_token(token.access_token)


def test_foreign_signature() -> None:
    forged = jwt.encode({"sub": "acc1", "sid": "s1", "exp": 9999999999}, "other-key", algorithm="HS256")
    with pytest.raises(ValueError):
        verify_token(forged)


def test_missing_sid() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"sub": "acc1", "exp": 9999999999},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    with pytest.raises(ValueError):
        verify_token(token)
