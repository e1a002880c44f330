"""Account domain entity.

One account per person with app access. Role and status drive every
authorization decision; services re-read the account before acting.
"""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import AccountRole, AccountStatus
from app.domain.exceptions import ValidationException


@dataclass
class AccountEntity:
    """Domain entity for an account (persistence-independent).

    The PIN digest is carried for verification only and never leaves the
    application layer. The password hash is owned by the record store and
    is not part of the entity.
    """

    id: str
    phone_number: str | None
    email: str
    name: str
    role: AccountRole
    status: AccountStatus
    pin_hash: str | None = None
    invited_by: str | None = None
    phone_verified: bool = False
    created: datetime | None = None
    updated: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate account invariants. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Account ID is required", field="id")
        if not self.email:
            raise ValidationException("Account auth email is required", field="email")

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def is_owner(self) -> bool:
        return self.role == AccountRole.OWNER

    def can_manage_team(self) -> bool:
        """Return whether this account may list members and toggle employee access."""
        return self.is_active and self.role in (AccountRole.OWNER, AccountRole.PARTNER)

    def can_toggle(self, member: "AccountEntity") -> bool:
        """Return whether this account may change member's status.

        Owner and partners toggle employees; only the owner toggles partners.
        Nobody toggles the owner or themselves.
        """
        if not self.can_manage_team() or member.id == self.id or member.is_owner:
            return False
        if member.role == AccountRole.PARTNER:
            return self.is_owner
        return True
