"""Invite API schemas."""

from datetime import datetime

from pydantic import Field

from app.domain.entities import InviteCodeEntity
from app.domain.enums import InviteRole
from app.schemas.base import CamelModel


class CodeRequest(CamelModel):
    """Body carrying a single invite or transfer code."""

    code: str = Field(..., max_length=16)


class InviteValidationResponse(CamelModel):
    valid: bool
    role: InviteRole | None = None
    error: str | None = None


class InviteCreateRequest(CamelModel):
    role: InviteRole


class InviteResponse(CamelModel):
    id: str
    code: str
    role: InviteRole
    expires_at: datetime
    used: bool
    created: datetime | None = None

    @classmethod
    def from_entity(cls, invite: InviteCodeEntity) -> "InviteResponse":
        return cls(
            id=invite.id,
            code=invite.code,
            role=invite.role,
            expires_at=invite.expires_at,
            used=invite.used,
            created=invite.created,
        )


class InviteSendRequest(CamelModel):
    phone_number: str = Field(..., max_length=20)
