"""Auth API: registration, login and the PIN-guarded session.

Password login opens a session in PIN_REQUIRED; registration opens it
UNLOCKED because the PIN was just chosen. The bearer token carries the
session id that keys the PIN state.
"""

from fastapi import APIRouter, Depends, Request, Response

from app.api.v1.dependencies import (
    CurrentAccount,
    DeviceId,
    SessionClaims,
    UnlockedSession,
    get_auth_service,
    get_pin_guard,
    get_registration_service,
    get_team_service,
)
from app.application.services.auth_service import AuthService
from app.application.services.pin_guard import PinGuard
from app.application.services.registration_service import RegistrationService
from app.application.services.team_service import TeamService
from app.core.limiter import limit_auth, limit_pin, limit_writes
from app.domain.entities import AccountEntity
from app.infrastructure.security.jwt import create_session_token, new_session_id
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
from app.schemas.base import SuccessResponse

router = APIRouter()


async def open_unlocked_session(
    pin_guard: PinGuard, account: AccountEntity, device_id: str | None
) -> TokenResponse:
    """Mint a token for a just-registered account and start its session unlocked."""
    token = create_session_token(account.id)
    await pin_guard.start_unlocked_session(token.sid, account, device_id)
    return TokenResponse(access_token=token.access_token)


@router.post("/register-owner", response_model=TokenResponse, status_code=201)
@limit_auth
async def register_owner(
    request: Request,
    body: RegistrationRequest,
    device_id: DeviceId,
    registration: RegistrationService = Depends(get_registration_service),
    pin_guard: PinGuard = Depends(get_pin_guard),
):
    """Bootstrap the business owner (only while no owner exists)."""
    owner = await registration.register_owner(body.to_draft())
    return await open_unlocked_session(pin_guard, owner, device_id)


@router.post("/register-invite", response_model=TokenResponse, status_code=201)
@limit_auth
async def register_with_invite(
    request: Request,
    body: CodeRegistrationRequest,
    device_id: DeviceId,
    registration: RegistrationService = Depends(get_registration_service),
    pin_guard: PinGuard = Depends(get_pin_guard),
):
    """Register through an invite code; role comes from the invite."""
    account = await registration.register_with_invite(body.code, body.to_draft())
    return await open_unlocked_session(pin_guard, account, device_id)


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Authenticate with phone number and password; the session then requires the PIN."""
    sid = new_session_id()
    account = await auth_service.login(body.phone_number.strip(), body.password, sid)
    token = create_session_token(account.id, sid=sid)
    return TokenResponse(access_token=token.access_token)


@router.post("/pin/verify", response_model=PinVerifyResponse)
@limit_pin
async def verify_pin(
    request: Request,
    body: PinRequest,
    claims: SessionClaims,
    account: CurrentAccount,
    device_id: DeviceId,
    pin_guard: PinGuard = Depends(get_pin_guard),
):
    """Unlock the session with the account PIN (wrong attempts are counted)."""
    result = await pin_guard.submit_pin(claims.sid, account, body.pin, device_id)
    return PinVerifyResponse(
        state=result.state,
        remembered=RememberedIdentityResponse.from_dto(result.remembered) if result.remembered else None,
    )


@router.post("/lock", response_model=SessionStateResponse)
async def lock_session(claims: SessionClaims, pin_guard: PinGuard = Depends(get_pin_guard)):
    """Lock an unlocked session (app backgrounded); the login is kept."""
    return SessionStateResponse(state=await pin_guard.lock(claims.sid))


@router.get("/session", response_model=SessionStatusResponse)
async def session_status(claims: SessionClaims, pin_guard: PinGuard = Depends(get_pin_guard)):
    return SessionStatusResponse.from_dto(await pin_guard.status(claims.sid))


@router.post("/logout", status_code=204)
async def logout(
    claims: SessionClaims,
    device_id: DeviceId,
    pin_guard: PinGuard = Depends(get_pin_guard),
) -> Response:
    """End the session and forget this device's remembered identity."""
    await pin_guard.end_session(claims.sid, device_id)
    return Response(status_code=204)


@router.get("/remembered", response_model=RememberedIdentityResponse)
@limit_auth
async def remembered_identity(
    request: Request, device_id: DeviceId, pin_guard: PinGuard = Depends(get_pin_guard)
):
    """Name and masked phone last unlocked on this device, for the PIN screen greeting.

    Unauthenticated; limited per client like login.
    """
    return RememberedIdentityResponse.from_dto(await pin_guard.get_remembered(device_id))


@router.get("/me", response_model=AccountResponse)
async def get_me(session: UnlockedSession, account: CurrentAccount):
    return AccountResponse.from_entity(account)


@router.post("/pin/change", response_model=SuccessResponse)
@limit_pin
async def change_pin(
    request: Request,
    body: PinChangeRequest,
    session: UnlockedSession,
    team: TeamService = Depends(get_team_service),
):
    """Change the caller's PIN; the current PIN is re-verified."""
    await team.change_pin(session.account_id, session.sid, body.current_pin, body.new_pin)
    return SuccessResponse()


@router.post("/phone/change", response_model=AccountResponse)
@limit_writes
async def change_phone(
    request: Request,
    body: PhoneChangeRequest,
    session: UnlockedSession,
    team: TeamService = Depends(get_team_service),
):
    """Move the caller's account to a new phone number proven by a phone-auth token."""
    account = await team.change_own_phone(
        session.account_id, body.new_phone_number.strip(), body.phone_token
    )
    return AccountResponse.from_entity(account)
