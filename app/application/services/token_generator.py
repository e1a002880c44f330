"""Invite and transfer code generation.

Codes are drawn uniformly from the configured alphabet (A-Z0-9 by default)
with the secrets module. Uniqueness is not guaranteed here: the store's
unique index rejects a collision and callers regenerate once.
"""

import re
import secrets
from datetime import datetime, timedelta

from app.shared.utils.datetime import utc_now

DEFAULT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

INVITE_CODE_LENGTH = 6
TRANSFER_CODE_LENGTH = 8
INVITE_TTL = timedelta(days=7)
TRANSFER_TTL = timedelta(hours=24)


def generate_code(length: int, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Return a random code of length characters from alphabet.

    Raises:
        ValueError: If length is not positive or alphabet is empty.
    """
    if length <= 0:
        raise ValueError("Code length must be positive")
    if not alphabet:
        raise ValueError("Alphabet must not be empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def get_expiration(ttl: timedelta, now: datetime | None = None) -> datetime:
    """Return now + ttl (UTC)."""
    return (now or utc_now()) + ttl


def is_valid_code(code: str | None, length: int) -> bool:
    """Return whether code is exactly length uppercase letters or digits."""
    if not code or len(code) != length:
        return False
    return re.fullmatch(r"[A-Z0-9]+", code) is not None


def normalize_code(code: str | None) -> str:
    """Strip whitespace and uppercase user-typed codes."""
    return (code or "").strip().upper()
