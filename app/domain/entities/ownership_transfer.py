"""Ownership transfer domain entity.

State machine: pending -> accepted -> completed, pending|accepted ->
cancelled, and pending|accepted -> expired once expires_at has passed.
Expiry is lazy: the stored status may still say pending/accepted after
expires_at, so callers read effective_status.
"""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import TransferStatus
from app.domain.exceptions import TransferNotActiveException


@dataclass
class OwnershipTransferEntity:
    """Domain entity for an ownership transfer.

    from_user and to_phone are immutable once created; accepted_at and
    completed_at are set once, on the corresponding transition.
    """

    id: str
    code: str
    from_user: str
    to_phone: str
    status: TransferStatus
    expires_at: datetime
    to_user: str | None = None
    accepted_at: datetime | None = None
    completed_at: datetime | None = None
    created: datetime | None = None

    def effective_status(self, now: datetime) -> TransferStatus:
        """Status with lazy expiry applied."""
        if not self.status.is_terminal and self.expires_at <= now:
            return TransferStatus.EXPIRED
        return self.status

    def is_stale(self, now: datetime) -> bool:
        """True when stored status is live but the transfer has expired."""
        return not self.status.is_terminal and self.expires_at <= now

    def is_live(self, now: datetime) -> bool:
        return not self.effective_status(now).is_terminal

    def _require(self, now: datetime, *allowed: TransferStatus) -> None:
        current = self.effective_status(now)
        if current not in allowed:
            raise TransferNotActiveException(current.value)

    def accept(self, recipient_id: str, now: datetime) -> None:
        """pending -> accepted, binding the recipient account."""
        self._require(now, TransferStatus.PENDING)
        self.to_user = recipient_id
        self.accepted_at = now
        self.status = TransferStatus.ACCEPTED

    def require_confirmable(self, now: datetime) -> None:
        self._require(now, TransferStatus.ACCEPTED)

    def complete(self, now: datetime) -> None:
        """accepted -> completed."""
        self._require(now, TransferStatus.ACCEPTED)
        self.completed_at = now
        self.status = TransferStatus.COMPLETED

    def cancel(self, now: datetime) -> None:
        """pending|accepted -> cancelled. Terminal or expired transfers are rejected."""
        self._require(now, TransferStatus.PENDING, TransferStatus.ACCEPTED)
        self.status = TransferStatus.CANCELLED
