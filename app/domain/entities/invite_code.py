"""Invite code domain entity.

A short-lived, single-use, role-scoped code for joining the team.
"""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import InviteRole


@dataclass
class InviteCodeEntity:
    """Domain entity for an invite code.

    Valid iff not used and expires_at is in the future. A used or expired
    invite is never valid regardless of other fields.
    """

    id: str
    code: str
    role: InviteRole
    created_by: str
    expires_at: datetime
    used: bool = False
    used_by: str | None = None
    created: datetime | None = None

    def invalid_reason(self, now: datetime) -> str | None:
        """Return why the invite cannot be redeemed at now, or None when valid.

        Reasons are for logs only; callers must not expose them.
        """
        if self.used:
            return "used"
        if self.expires_at <= now:
            return "expired"
        return None

    def is_valid(self, now: datetime) -> bool:
        return self.invalid_reason(now) is None
