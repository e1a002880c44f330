"""DTOs for session-local PIN state.

PinSessionData is serialized to the session-state store as a plain dict;
it never reaches the record store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.domain.enums import PinSessionState
from app.shared.utils.datetime import format_store_datetime, parse_store_datetime


@dataclass
class PinSessionData:
    """Mutable PIN guard state of one login session."""

    state: PinSessionState
    failed_attempts: int = 0
    lockout_until: datetime | None = None
    last_activity: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "failedAttempts": self.failed_attempts,
            "lockoutUntil": format_store_datetime(self.lockout_until) if self.lockout_until else None,
            "lastActivity": format_store_datetime(self.last_activity) if self.last_activity else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PinSessionData":
        lockout = data.get("lockoutUntil")
        activity = data.get("lastActivity")
        return cls(
            state=PinSessionState(data["state"]),
            failed_attempts=int(data.get("failedAttempts", 0)),
            lockout_until=parse_store_datetime(lockout) if lockout else None,
            last_activity=parse_store_datetime(activity) if activity else None,
        )


@dataclass(frozen=True)
class RememberedIdentity:
    """Non-sensitive identity kept per device for fast re-entry (never PIN or digest)."""

    account_id: str
    name: str
    phone_hint: str

    def to_dict(self) -> dict[str, Any]:
        return {"accountId": self.account_id, "name": self.name, "phoneHint": self.phone_hint}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RememberedIdentity":
        return cls(
            account_id=data["accountId"],
            name=data["name"],
            phone_hint=data["phoneHint"],
        )


@dataclass(frozen=True)
class SessionStatus:
    """Read model of a session's PIN state."""

    state: PinSessionState
    failed_attempts: int
    lockout_remaining: int


@dataclass(frozen=True)
class PinVerifyResult:
    state: PinSessionState
    remembered: RememberedIdentity | None = None
