"""Setup status: whether the business has been bootstrapped with an owner."""

from __future__ import annotations

import logging

from app.application.dtos.setup import SetupStatus
from app.application.interfaces.repositories import IAccountRepository, IAppConfigRepository
from app.domain.exceptions import IdentityException

logger = logging.getLogger(__name__)


class SetupService:
    def __init__(self, app_config_repo: IAppConfigRepository, account_repo: IAccountRepository) -> None:
        self.app_config_repo = app_config_repo
        self.account_repo = account_repo

    async def get_status(self) -> SetupStatus:
        """Read the app_config singleton (elevated path) and owner presence.

        On store failure reports setup complete so existing users are never
        sent to the owner bootstrap screen.
        """
        try:
            config = await self.app_config_repo.get()
            owner = await self.account_repo.get_owner()
        except IdentityException:
            logger.error("Setup status unavailable; reporting setup complete", exc_info=True)
            return SetupStatus(setup_complete=True, owner_exists=True)
        owner_exists = owner is not None
        setup_complete = bool(config and config.setup_complete) or owner_exists
        return SetupStatus(setup_complete=setup_complete, owner_exists=owner_exists)
