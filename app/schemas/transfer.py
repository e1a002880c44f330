"""Ownership transfer API schemas."""

from datetime import datetime

from pydantic import Field

from app.domain.entities import OwnershipTransferEntity
from app.domain.enums import TransferStatus
from app.schemas.base import CamelModel


class TransferInitiateRequest(CamelModel):
    to_phone: str = Field(..., max_length=20)


class TransferInitiateResponse(CamelModel):
    success: bool = True
    code: str


class TransferValidationResponse(CamelModel):
    """Public view of a pending transfer; only the fields the recipient page needs."""

    valid: bool
    owner_name: str | None = None
    to_phone: str | None = None
    existing_user: bool | None = None
    error: str | None = None


class TransferConfirmRequest(CamelModel):
    code: str = Field(..., max_length=16)
    pin: str = Field(..., max_length=8)


class TransferResponse(CamelModel):
    id: str
    code: str
    to_phone: str
    status: TransferStatus
    expires_at: datetime
    to_user: str | None = None
    accepted_at: datetime | None = None
    created: datetime | None = None

    @classmethod
    def from_entity(cls, transfer: OwnershipTransferEntity) -> "TransferResponse":
        return cls(
            id=transfer.id,
            code=transfer.code,
            to_phone=transfer.to_phone,
            status=transfer.status,
            expires_at=transfer.expires_at,
            to_user=transfer.to_user,
            accepted_at=transfer.accepted_at,
            created=transfer.created,
        )
