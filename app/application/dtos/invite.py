"""DTOs for invite validation."""

from dataclasses import dataclass

from app.domain.enums import InviteRole


@dataclass(frozen=True)
class InviteValidation:
    """Public result of validating an invite code. Never carries issuer or usage."""

    valid: bool
    role: InviteRole | None = None
