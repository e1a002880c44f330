"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Implementations map raw store records to domain entities and convert store
failures: unique violations raise DuplicateValueException, everything else
raises UpstreamUnavailableException.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from app.domain.enums import AccountRole, AccountStatus, InviteRole

if TYPE_CHECKING:
    from app.application.dtos.account import AccountCreate
    from app.domain.entities import (
        AccountEntity,
        AppConfigEntity,
        InviteCodeEntity,
        OwnershipTransferEntity,
    )


class IAccountRepository(Protocol):
    """Protocol for account repository (DIP)."""

    async def get_by_id(self, account_id: str) -> AccountEntity | None:
        """Return account by ID."""

    async def get_by_phone(self, phone_number: str) -> AccountEntity | None:
        """Return the account bound to phone_number."""

    async def get_owner(self) -> AccountEntity | None:
        """Return the account holding role=owner, if any."""

    async def list_all(self) -> list[AccountEntity]:
        """Return all accounts, newest first."""

    async def create(self, data: AccountCreate) -> AccountEntity:
        """Create an account. Raises DuplicateValueException on unique violation."""

    async def authenticate(self, phone_number: str, password: str) -> AccountEntity | None:
        """Return the account when password matches, else None."""

    async def update_role(self, account_id: str, role: AccountRole) -> AccountEntity:
        """Set role; only registration and completed transfers call this."""

    async def update_status(self, account_id: str, status: AccountStatus) -> AccountEntity:
        """Set access status."""

    async def update_phone(
        self, account_id: str, phone_number: str, phone_verified: bool
    ) -> AccountEntity:
        """Set phone number and the derived auth email."""

    async def update_pin(self, account_id: str, pin_hash: str) -> AccountEntity:
        """Store a new PIN digest."""


class IInviteCodeRepository(Protocol):
    """Protocol for invite code repository (DIP)."""

    async def get_by_id(self, invite_id: str) -> InviteCodeEntity | None:
        """Return invite by ID."""

    async def get_by_code(self, code: str) -> InviteCodeEntity | None:
        """Return invite by exact code."""

    async def list_pending(self, now: datetime) -> list[InviteCodeEntity]:
        """Return unused, unexpired invites, newest first."""

    async def create(
        self, code: str, role: InviteRole, created_by: str, expires_at: datetime
    ) -> InviteCodeEntity:
        """Create an unused invite. Raises DuplicateValueException on code collision."""

    async def mark_used(self, invite_id: str, used_by: str) -> InviteCodeEntity:
        """Set used=true and usedBy."""

    async def delete(self, invite_id: str) -> None:
        """Delete an invite."""


class IOwnershipTransferRepository(Protocol):
    """Protocol for ownership transfer repository (DIP)."""

    async def get_by_code(self, code: str) -> OwnershipTransferEntity | None:
        """Return transfer by exact code (stored status, no expiry applied)."""

    async def list_live_for_owner(self, owner_id: str) -> list[OwnershipTransferEntity]:
        """Return transfers from owner whose stored status is pending or accepted."""

    async def create(
        self, code: str, from_user: str, to_phone: str, expires_at: datetime
    ) -> OwnershipTransferEntity:
        """Create a pending transfer. Raises DuplicateValueException on code collision."""

    async def save_state(self, transfer: OwnershipTransferEntity) -> OwnershipTransferEntity:
        """Persist status, toUser, acceptedAt and completedAt of transfer."""


class IAppConfigRepository(Protocol):
    """Protocol for the app_config singleton (elevated access)."""

    async def get(self) -> AppConfigEntity | None:
        """Return the singleton, or None when it was never written."""

    async def mark_setup_complete(self) -> AppConfigEntity:
        """Set setupComplete=true, creating the singleton if missing."""
