"""Authorization service: role checks against a freshly read account.

Every privileged action re-reads the acting account; cached client state
and token claims are never trusted for role decisions.
"""

from __future__ import annotations

from app.application.interfaces.repositories import IAccountRepository
from app.core.messages import translate
from app.domain.entities import AccountEntity
from app.domain.exceptions import AuthenticationException, AuthorizationException


class AuthorizationService:
    """Centralized role checking over IAccountRepository."""

    def __init__(self, account_repo: IAccountRepository) -> None:
        self.account_repo = account_repo

    async def require_active(self, account_id: str) -> AccountEntity:
        """Return the account if it exists and is active.

        Raises:
            AuthenticationException: Account missing or disabled.
        """
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise AuthenticationException(translate("invalid_session"))
        if not account.is_active:
            raise AuthenticationException(translate("account_disabled"))
        return account

    async def require_owner(self, account_id: str, action: str) -> AccountEntity:
        """Return the account if it currently holds role=owner; raise AuthorizationException otherwise."""
        account = await self.require_active(account_id)
        if not account.is_owner:
            raise AuthorizationException(action=action, message=translate("owner_only"))
        return account

    async def require_team_manager(self, account_id: str, action: str) -> AccountEntity:
        """Return the account if it is an active owner or partner."""
        account = await self.require_active(account_id)
        if not account.can_manage_team():
            raise AuthorizationException(action=action)
        return account
