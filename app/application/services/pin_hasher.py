"""PIN digest computation and verification.

PINs are 4 digits and low-entropy; the digest is deterministic (fixed,
versioned prefix + SHA-256) so it can be compared directly. Protection
comes from the PIN guard lockout, not from salting.
"""

from __future__ import annotations

import hashlib
import hmac
import re

from app.core.config import get_settings

_PIN_RE = re.compile(r"^[0-9]{4}$")


def is_valid_pin(pin: str | None) -> bool:
    """Return whether pin is exactly 4 ASCII digits."""
    return pin is not None and _PIN_RE.fullmatch(pin) is not None


class PinHasher:
    """Single source of truth for PIN digests (prefix + SHA-256, hex)."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def hash(self, pin: str) -> str:
        """Return the 64-char hex digest of prefix + pin.

        Raises:
            ValueError: If pin is not 4 digits (callers validate shape first).
        """
        if not is_valid_pin(pin):
            raise ValueError("PIN must be exactly 4 digits")
        return hashlib.sha256(f"{self.prefix}{pin}".encode()).hexdigest()

    def verify(self, pin: str, digest: str | None) -> bool:
        """Re-hash pin and compare in constant time. False for a missing digest or malformed pin."""
        if not digest or not is_valid_pin(pin):
            return False
        return hmac.compare_digest(self.hash(pin), digest)


def get_pin_hasher() -> PinHasher:
    return PinHasher(get_settings().pin_hash_prefix)


def hash_pin(pin: str) -> str:
    return get_pin_hasher().hash(pin)


def verify_pin(pin: str, digest: str | None) -> bool:
    return get_pin_hasher().verify(pin, digest)
