"""Primary authentication: phone + password login opening a PIN-guarded session."""

from __future__ import annotations

import logging

from app.application.interfaces.repositories import IAccountRepository
from app.application.services.pin_guard import PinGuard
from app.core.messages import translate
from app.domain.entities import AccountEntity
from app.domain.exceptions import AuthenticationException
from app.domain.value_objects.phone import is_valid_e164
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class AuthService:
    """Password login; the PIN guard takes over afterwards."""

    def __init__(self, account_repo: IAccountRepository, pin_guard: PinGuard) -> None:
        self.account_repo = account_repo
        self.pin_guard = pin_guard

    @traced("auth.login")
    async def login(self, phone_number: str, password: str, sid: str) -> AccountEntity:
        """Authenticate and start session sid in PIN_REQUIRED.

        Raises:
            AuthenticationException: Bad credentials or disabled account (same
                message for unknown phone and wrong password).
        """
        if not is_valid_e164(phone_number) or not password:
            raise AuthenticationException(translate("invalid_credentials"))
        account = await self.account_repo.authenticate(phone_number, password)
        if account is None:
            logger.info("Login failed: invalid credentials")
            raise AuthenticationException(translate("invalid_credentials"))
        if not account.is_active:
            logger.info("Login refused for disabled account %s", account.id)
            raise AuthenticationException(translate("account_disabled"))
        await self.pin_guard.start_session(sid)
        logger.info("Account %s logged in; PIN required", account.id)
        return account
