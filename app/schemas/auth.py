"""Auth API schemas: registration, login, PIN session and own-account changes.

Field shapes are checked loosely here; the services apply the exact rules
(E.164, 4-digit PIN, name length) so every failure carries a localized
message.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.application.dtos.account import AccountDraft
from app.application.dtos.session import RememberedIdentity, SessionStatus
from app.domain.entities import AccountEntity
from app.domain.enums import AccountRole, AccountStatus, PinSessionState
from app.schemas.base import CamelModel


class RegistrationRequest(CamelModel):
    """Request body for POST /auth/register-owner."""

    phone_number: str = Field(..., max_length=20)
    name: str = Field(..., max_length=200)
    password: str = Field(..., max_length=128)
    pin: str = Field(..., max_length=8)
    phone_token: str = Field(..., max_length=8192, description="Phone-auth ID token for phone_number")

    def to_draft(self) -> AccountDraft:
        return AccountDraft(
            phone_number=self.phone_number.strip(),
            name=self.name,
            password=self.password,
            pin=self.pin,
            phone_token=self.phone_token,
        )


class CodeRegistrationRequest(RegistrationRequest):
    """Registration through an invite or transfer code."""

    code: str = Field(..., max_length=16)


class LoginRequest(CamelModel):
    """Request body for POST /auth/login."""

    phone_number: str = Field(..., max_length=20)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class PinRequest(CamelModel):
    pin: str = Field(..., max_length=8)


class RememberedIdentityResponse(CamelModel):
    name: str | None = None
    phone_hint: str | None = None

    @classmethod
    def from_dto(cls, remembered: RememberedIdentity | None) -> "RememberedIdentityResponse":
        if remembered is None:
            return cls()
        return cls(name=remembered.name, phone_hint=remembered.phone_hint or None)


class PinVerifyResponse(CamelModel):
    success: bool = True
    state: PinSessionState
    remembered: RememberedIdentityResponse | None = None


class SessionStateResponse(CamelModel):
    state: PinSessionState


class SessionStatusResponse(CamelModel):
    """Response for GET /auth/session."""

    state: PinSessionState
    failed_attempts: int = 0
    lockout_remaining: int = Field(0, description="Seconds until PIN entry is allowed again")

    @classmethod
    def from_dto(cls, status: SessionStatus) -> "SessionStatusResponse":
        return cls(
            state=status.state,
            failed_attempts=status.failed_attempts,
            lockout_remaining=status.lockout_remaining,
        )


class AccountResponse(CamelModel):
    """An account as shown to its owner or team managers. No PIN, password or auth email."""

    id: str
    phone_number: str | None = None
    name: str
    role: AccountRole
    status: AccountStatus
    phone_verified: bool = False
    invited_by: str | None = None
    created: datetime | None = None

    @classmethod
    def from_entity(cls, account: AccountEntity) -> "AccountResponse":
        return cls(
            id=account.id,
            phone_number=account.phone_number,
            name=account.name,
            role=account.role,
            status=account.status,
            phone_verified=account.phone_verified,
            invited_by=account.invited_by,
            created=account.created,
        )


class PinChangeRequest(CamelModel):
    current_pin: str = Field(..., max_length=8)
    new_pin: str = Field(..., max_length=8)


class PhoneChangeRequest(CamelModel):
    new_phone_number: str = Field(..., max_length=20)
    phone_token: str = Field(..., max_length=8192)
