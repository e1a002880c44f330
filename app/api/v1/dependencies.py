"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories, application services and the
bearer session. Services are built from the process-wide infrastructure
(record store, session-state store, notification dispatcher) here; routes
depend only on these dependencies, not on infrastructure directly.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.interfaces.services import INotificationDispatcher, ISessionStateStore
from app.application.services.auth_service import AuthService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.invite_service import InviteService
from app.application.services.ownership_transfer_service import OwnershipTransferService
from app.application.services.phone_identity_verifier import (
    PhoneIdentityVerifier,
    get_phone_identity_verifier,
)
from app.application.services.pin_guard import PinGuard
from app.application.services.pin_hasher import PinHasher, get_pin_hasher
from app.application.services.registration_service import RegistrationService
from app.application.services.setup_service import SetupService
from app.application.services.team_service import TeamService
from app.core.config import get_settings
from app.core.messages import translate
from app.domain.entities import AccountEntity
from app.domain.exceptions import AuthenticationException
from app.infrastructure.notifications import get_notification_dispatcher
from app.infrastructure.security.jwt import TokenClaims, verify_token
from app.infrastructure.session import get_session_store
from app.infrastructure.store import IRecordStore, get_record_store
from app.infrastructure.store.repositories import (
    AccountRepository,
    AppConfigRepository,
    InviteCodeRepository,
    OwnershipTransferRepository,
)

_http_bearer = HTTPBearer(auto_error=False)

DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,128}$")


# ---- Infrastructure ----


def get_store() -> IRecordStore:
    return get_record_store()


def get_session_state_store() -> ISessionStateStore:
    return get_session_store()


def get_notifier() -> INotificationDispatcher:
    return get_notification_dispatcher()


def get_account_repo(store: Annotated[IRecordStore, Depends(get_store)]) -> AccountRepository:
    return AccountRepository(store)


def get_invite_repo(store: Annotated[IRecordStore, Depends(get_store)]) -> InviteCodeRepository:
    return InviteCodeRepository(store)


def get_transfer_repo(
    store: Annotated[IRecordStore, Depends(get_store)],
) -> OwnershipTransferRepository:
    return OwnershipTransferRepository(store)


def get_app_config_repo(store: Annotated[IRecordStore, Depends(get_store)]) -> AppConfigRepository:
    return AppConfigRepository(store)


# ---- Application services ----


def get_hasher() -> PinHasher:
    return get_pin_hasher()


def get_verifier() -> PhoneIdentityVerifier:
    return get_phone_identity_verifier()


def get_pin_guard(
    store: Annotated[ISessionStateStore, Depends(get_session_state_store)],
    hasher: Annotated[PinHasher, Depends(get_hasher)],
) -> PinGuard:
    settings = get_settings()
    return PinGuard(
        store,
        hasher,
        max_attempts=settings.pin_max_attempts,
        lockout=timedelta(seconds=settings.pin_lockout_seconds),
        idle_timeout=timedelta(seconds=settings.pin_idle_timeout_seconds),
        session_ttl_seconds=settings.access_token_expire_minutes * 60,
    )


def get_auth_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    pin_guard: Annotated[PinGuard, Depends(get_pin_guard)],
) -> AuthService:
    return AuthService(account_repo, pin_guard)


def get_invite_service(
    invite_repo: Annotated[InviteCodeRepository, Depends(get_invite_repo)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    notifier: Annotated[INotificationDispatcher, Depends(get_notifier)],
) -> InviteService:
    return InviteService(invite_repo, account_repo, notifier, alphabet=get_settings().code_alphabet)


def get_transfer_service(
    transfer_repo: Annotated[OwnershipTransferRepository, Depends(get_transfer_repo)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    notifier: Annotated[INotificationDispatcher, Depends(get_notifier)],
    pin_guard: Annotated[PinGuard, Depends(get_pin_guard)],
) -> OwnershipTransferService:
    return OwnershipTransferService(
        transfer_repo, account_repo, notifier, pin_guard, alphabet=get_settings().code_alphabet
    )


def get_registration_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    app_config_repo: Annotated[AppConfigRepository, Depends(get_app_config_repo)],
    invite_service: Annotated[InviteService, Depends(get_invite_service)],
    transfer_service: Annotated[OwnershipTransferService, Depends(get_transfer_service)],
    verifier: Annotated[PhoneIdentityVerifier, Depends(get_verifier)],
    hasher: Annotated[PinHasher, Depends(get_hasher)],
) -> RegistrationService:
    return RegistrationService(
        account_repo, app_config_repo, invite_service, transfer_service, verifier, hasher
    )


def get_team_service(
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
    pin_guard: Annotated[PinGuard, Depends(get_pin_guard)],
    verifier: Annotated[PhoneIdentityVerifier, Depends(get_verifier)],
    hasher: Annotated[PinHasher, Depends(get_hasher)],
) -> TeamService:
    return TeamService(account_repo, pin_guard, verifier, hasher)


def get_setup_service(
    app_config_repo: Annotated[AppConfigRepository, Depends(get_app_config_repo)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
) -> SetupService:
    return SetupService(app_config_repo, account_repo)


# ---- Request context ----


def get_device_id(request: Request) -> str | None:
    """Device id header used to key the remembered identity; ignored when malformed."""
    raw = request.headers.get(get_settings().device_id_header)
    if raw and DEVICE_ID_PATTERN.match(raw.strip()):
        return raw.strip()
    return None


async def get_session_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> TokenClaims:
    """Decode the bearer token; raise 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationException(translate("not_authenticated"))
    try:
        return verify_token(credentials.credentials)
    except ValueError:
        raise AuthenticationException(translate("invalid_session")) from None


async def get_current_account(
    claims: Annotated[TokenClaims, Depends(get_session_claims)],
    account_repo: Annotated[AccountRepository, Depends(get_account_repo)],
) -> AccountEntity:
    """Re-read the caller's account on every request; disabled accounts are rejected."""
    return await AuthorizationService(account_repo).require_active(claims.account_id)


async def require_unlocked_session(
    claims: Annotated[TokenClaims, Depends(get_session_claims)],
    pin_guard: Annotated[PinGuard, Depends(get_pin_guard)],
) -> TokenClaims:
    """Gate for protected routes: the session's PIN must have been entered (403 otherwise)."""
    await pin_guard.require_unlocked(claims.sid)
    return claims


SessionClaims = Annotated[TokenClaims, Depends(get_session_claims)]
UnlockedSession = Annotated[TokenClaims, Depends(require_unlocked_session)]
CurrentAccount = Annotated[AccountEntity, Depends(get_current_account)]
DeviceId = Annotated[str | None, Depends(get_device_id)]
