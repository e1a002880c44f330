"""Team management API schemas."""

from pydantic import Field

from app.domain.enums import AccountStatus
from app.schemas.base import CamelModel


class MemberStatusRequest(CamelModel):
    status: AccountStatus


class MemberPhoneRequest(CamelModel):
    new_phone_number: str = Field(..., max_length=20)
