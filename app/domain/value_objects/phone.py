"""Phone number value object.

Phone numbers are E.164 strings (leading '+', country code not starting
with 0, 7 to 15 digits). The store's auth model needs an email, so each
phone derives a surrogate auth email that is never shown to users.
"""

import re
from dataclasses import dataclass

from app.core.constants import AUTH_EMAIL_DOMAIN

_E164_RE = re.compile(r"^\+[1-9]\d{6,14}$")


def is_valid_e164(value: str | None) -> bool:
    """Return whether value is an E.164 phone number."""
    return bool(value) and _E164_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class PhoneNumber:
    """Value object for an E.164 phone number.

    Raises ValueError on construction when the value is not E.164.
    """

    value: str

    def __post_init__(self) -> None:
        if not is_valid_e164(self.value):
            raise ValueError("Phone number must be E.164 (e.g. +51987654321)")

    @property
    def auth_email(self) -> str:
        """Surrogate auth email: digits of the number at the phone domain."""
        return f"{self.value.replace('+', '')}@{AUTH_EMAIL_DOMAIN}"

    @property
    def masked(self) -> str:
        """Number with all but the last four digits hidden (e.g. +51*****4321)."""
        visible = self.value[-4:]
        prefix = self.value[:3]
        hidden = "*" * (len(self.value) - len(prefix) - len(visible))
        return f"{prefix}{hidden}{visible}"

    def __str__(self) -> str:
        return self.value
