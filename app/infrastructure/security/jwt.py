"""Bearer session tokens.

Each login or registration mints a token carrying the account id (sub) and
a fresh session id (sid). The sid keys the PIN guard state, so logging out
or a new login invalidates PIN state without touching other sessions.
Uses app.core.config for secret and algorithm.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.generators import generate_cuid


@dataclass(frozen=True)
class SessionToken:
    access_token: str
    sid: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    sid: str


def new_session_id() -> str:
    return generate_cuid()


def create_session_token(
    account_id: str,
    sid: str | None = None,
    expires_delta: timedelta | None = None,
) -> SessionToken:
    """Create a JWT for account_id bound to session sid (a new one when omitted).

    Args:
        account_id: Account id stored as the sub claim.
        sid: Session id already holding PIN state, if any.
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        SessionToken with the encoded JWT, the sid and the expiry.
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(UTC) + expires_delta
    sid = sid or new_session_id()
    encoded = jwt.encode(
        {"sub": account_id, "sid": sid, "exp": expire},
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return SessionToken(access_token=cast(str, encoded), sid=sid, expires_at=expire)


def verify_token(token: str) -> TokenClaims:
    """Verify and decode a session JWT.

    Enforces presence of exp, sub and sid.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    sid = payload.get("sid")
    if not sub or not sid:
        raise ValueError("Token missing required claim: sub or sid")
    return TokenClaims(account_id=str(sub), sid=str(sid))
