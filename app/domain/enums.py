"""Domain enumerations for the identity service.

Enums represent fixed sets of domain values (roles, statuses, session states).
"""

from enum import Enum


class AccountRole(str, Enum):
    """Role of an account. Exactly one account holds OWNER at any time."""

    OWNER = "owner"
    PARTNER = "partner"
    EMPLOYEE = "employee"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [role.value for role in cls]


class AccountStatus(str, Enum):
    """Account access status. Accounts are deactivated, never deleted."""

    ACTIVE = "active"
    PENDING = "pending"
    DISABLED = "disabled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class InviteRole(str, Enum):
    """Role an invite grants on redemption (never owner)."""

    PARTNER = "partner"
    EMPLOYEE = "employee"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]

    def to_account_role(self) -> AccountRole:
        return AccountRole(self.value)


class TransferStatus(str, Enum):
    """Ownership transfer lifecycle.

    pending -> accepted -> completed; pending|accepted -> cancelled;
    pending|accepted -> expired (evaluated lazily on read).
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]

    @property
    def is_terminal(self) -> bool:
        """Return True for statuses that admit no further transition."""
        return self in (
            TransferStatus.COMPLETED,
            TransferStatus.EXPIRED,
            TransferStatus.CANCELLED,
        )


class PinSessionState(str, Enum):
    """PIN guard state of one login session."""

    NO_PIN_REQUIRED = "no_pin_required"
    PIN_REQUIRED = "pin_required"
    UNLOCKED = "unlocked"
    LOCKED = "locked"
