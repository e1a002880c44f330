"""Ownership transfer API."""

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    DeviceId,
    SessionClaims,
    UnlockedSession,
    get_pin_guard,
    get_registration_service,
    get_transfer_service,
)
from app.api.v1.endpoints.auth import open_unlocked_session
from app.application.services.ownership_transfer_service import OwnershipTransferService
from app.application.services.pin_guard import PinGuard
from app.application.services.registration_service import RegistrationService
from app.core.limiter import (
    check_code_validation_rate,
    limit_auth,
    limit_code_validation,
    limit_pin,
    limit_writes,
)
from app.core.messages import translate
from app.schemas.auth import CodeRegistrationRequest, TokenResponse
from app.schemas.base import SuccessResponse
from app.schemas.invite import CodeRequest
from app.schemas.transfer import (
    TransferConfirmRequest,
    TransferInitiateRequest,
    TransferInitiateResponse,
    TransferResponse,
    TransferValidationResponse,
)

router = APIRouter()


@router.post("/initiate", response_model=TransferInitiateResponse, status_code=201)
@limit_writes
async def initiate_transfer(
    request: Request,
    body: TransferInitiateRequest,
    session: UnlockedSession,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    """Owner starts a transfer to a phone number; the recipient is notified."""
    transfer = await transfers.initiate(session.account_id, body.to_phone.strip())
    return TransferInitiateResponse(code=transfer.code)


@router.post(
    "/validate",
    response_model=TransferValidationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(check_code_validation_rate)],
)
@limit_code_validation
async def validate_transfer(
    request: Request,
    body: CodeRequest,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    """Public check for the recipient page."""
    result = await transfers.validate(body.code)
    if not result.valid:
        return TransferValidationResponse(valid=False, error=translate("invalid_code"))
    return TransferValidationResponse(
        valid=True,
        owner_name=result.owner_name,
        to_phone=result.to_phone,
        existing_user=result.existing_user,
    )


@router.post("/accept", response_model=SuccessResponse)
@limit_writes
async def accept_transfer(
    request: Request,
    body: CodeRequest,
    claims: SessionClaims,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    """An existing account accepts a transfer addressed to its phone number."""
    await transfers.accept(body.code, claims.account_id)
    return SuccessResponse()


@router.post("/register", response_model=TokenResponse, status_code=201)
@limit_auth
async def register_recipient(
    request: Request,
    body: CodeRegistrationRequest,
    device_id: DeviceId,
    registration: RegistrationService = Depends(get_registration_service),
    pin_guard: PinGuard = Depends(get_pin_guard),
):
    """Create the recipient's account (as partner) and accept the transfer."""
    account = await registration.register_transfer_recipient(body.code, body.to_draft())
    return await open_unlocked_session(pin_guard, account, device_id)


@router.post("/confirm", response_model=SuccessResponse)
@limit_pin
async def confirm_transfer(
    request: Request,
    body: TransferConfirmRequest,
    claims: SessionClaims,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    """Owner confirms an accepted transfer with their PIN; roles swap."""
    await transfers.confirm(body.code, claims.account_id, body.pin, claims.sid)
    return SuccessResponse()


@router.post("/cancel", response_model=SuccessResponse)
@limit_writes
async def cancel_transfer(
    request: Request,
    body: CodeRequest,
    claims: SessionClaims,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    await transfers.cancel(body.code, claims.account_id)
    return SuccessResponse()


@router.get("/active", response_model=TransferResponse | None)
async def active_transfer(
    claims: SessionClaims,
    transfers: OwnershipTransferService = Depends(get_transfer_service),
):
    """The caller's live outgoing transfer, or null."""
    transfer = await transfers.get_active(claims.account_id)
    return TransferResponse.from_entity(transfer) if transfer else None
