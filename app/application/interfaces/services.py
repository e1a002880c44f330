"""Service interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from typing import Any, Protocol


class ISessionStateStore(Protocol):
    """Key-value store for session-local state (PIN guard, remembered identity).

    Values are JSON-serializable dicts. Never the record store.
    """

    async def get(self, key: str) -> dict[str, Any] | None:
        """Return value for key, or None if missing or expired."""

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        """Store value under key for ttl seconds."""

    async def delete(self, key: str) -> None:
        """Remove key; no error when missing."""


class INotificationDispatcher(Protocol):
    """Outbound messaging (WhatsApp or log). Best-effort; callers never roll back on failure."""

    async def send_invite(self, phone_number: str, code: str, role: str) -> None:
        """Send an invite code to phone_number."""

    async def send_transfer_request(self, phone_number: str, owner_name: str, code: str) -> None:
        """Tell the recipient an owner wants to transfer the business."""

    async def send_transfer_accepted(self, phone_number: str, recipient_name: str) -> None:
        """Tell the owner the recipient accepted; the owner must confirm with PIN."""
