"""DTOs for ownership transfer validation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferValidation:
    """Public result of validating a transfer code.

    existing_user tells the recipient page whether to log in or register.
    """

    valid: bool
    owner_name: str | None = None
    to_phone: str | None = None
    existing_user: bool = False
