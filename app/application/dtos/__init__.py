"""Application DTOs (no store dependency)."""

from app.application.dtos.account import AccountCreate, AccountDraft
from app.application.dtos.invite import InviteValidation
from app.application.dtos.phone import PhoneVerificationResult
from app.application.dtos.session import (
    PinSessionData,
    PinVerifyResult,
    RememberedIdentity,
    SessionStatus,
)
from app.application.dtos.setup import SetupStatus
from app.application.dtos.transfer import TransferValidation

__all__ = [
    "AccountCreate",
    "AccountDraft",
    "InviteValidation",
    "PhoneVerificationResult",
    "PinSessionData",
    "PinVerifyResult",
    "RememberedIdentity",
    "SessionStatus",
    "SetupStatus",
    "TransferValidation",
]
