"""DTOs for phone-proof verification."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhoneVerificationResult:
    """Outcome of verifying a phone-proof token; error is user-presentable."""

    valid: bool
    phone_number: str | None = None
    error: str | None = None
