"""SetupService status reads."""

from unittest.mock import AsyncMock

from app.application.services.setup_service import SetupService
from app.domain.enums import AccountRole
from app.domain.exceptions import UpstreamUnavailableException


async def test_fresh_install(app_config_repo, account_repo) -> None:
    status = await SetupService(app_config_repo, account_repo).get_status()
    assert not status.setup_complete
    assert not status.owner_exists


async def test_flag_written(app_config_repo, account_repo) -> None:
    await app_config_repo.mark_setup_complete()
    status = await SetupService(app_config_repo, account_repo).get_status()
    assert status.setup_complete
    assert not status.owner_exists


async def test_owner_without_flag_counts_as_complete(app_config_repo, account_repo, make_account) -> None:
    await make_account("+51987654321", role=AccountRole.OWNER)
    status = await SetupService(app_config_repo, account_repo).get_status()
    assert status.setup_complete
    assert status.owner_exists


async def test_store_failure_reports_complete(account_repo) -> None:
    """Existing users must never be routed to the owner bootstrap screen."""
    failing = AsyncMock()
    failing.get = AsyncMock(side_effect=UpstreamUnavailableException("get_app_config"))
    status = await SetupService(failing, account_repo).get_status()
    assert status.setup_complete
    assert status.owner_exists
