"""Security: session tokens and password hashing."""

from app.infrastructure.security.jwt import (
    SessionToken,
    TokenClaims,
    create_session_token,
    new_session_id,
    verify_token,
)
from app.infrastructure.security.password import get_password_hash, verify_password

__all__ = [
    "SessionToken",
    "TokenClaims",
    "create_session_token",
    "get_password_hash",
    "new_session_id",
    "verify_password",
    "verify_token",
]
