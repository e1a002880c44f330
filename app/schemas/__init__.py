"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    AccountResponse,
    CodeRegistrationRequest,
    LoginRequest,
    PhoneChangeRequest,
    PinChangeRequest,
    PinRequest,
    PinVerifyResponse,
    RegistrationRequest,
    RememberedIdentityResponse,
    SessionStateResponse,
    SessionStatusResponse,
    TokenResponse,
)
from app.schemas.base import CamelModel, SuccessResponse
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.invite import (
    CodeRequest,
    InviteCreateRequest,
    InviteResponse,
    InviteSendRequest,
    InviteValidationResponse,
)
from app.schemas.setup import SetupStatusResponse
from app.schemas.team import MemberPhoneRequest, MemberStatusRequest
from app.schemas.transfer import (
    TransferConfirmRequest,
    TransferInitiateRequest,
    TransferInitiateResponse,
    TransferResponse,
    TransferValidationResponse,
)

__all__ = [
    "AccountResponse",
    "CamelModel",
    "CodeRegistrationRequest",
    "CodeRequest",
    "HealthResponse",
    "InviteCreateRequest",
    "InviteResponse",
    "InviteSendRequest",
    "InviteValidationResponse",
    "LoginRequest",
    "MemberPhoneRequest",
    "MemberStatusRequest",
    "PhoneChangeRequest",
    "PinChangeRequest",
    "PinRequest",
    "PinVerifyResponse",
    "ReadinessResponse",
    "RegistrationRequest",
    "RememberedIdentityResponse",
    "SessionStateResponse",
    "SessionStatusResponse",
    "SetupStatusResponse",
    "SuccessResponse",
    "TokenResponse",
    "TransferConfirmRequest",
    "TransferInitiateRequest",
    "TransferInitiateResponse",
    "TransferResponse",
    "TransferValidationResponse",
]
