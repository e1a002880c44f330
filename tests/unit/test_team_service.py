"""TeamService: listing, access toggles, phone and PIN changes."""

import pytest

from app.application.services.phone_identity_verifier import PhoneIdentityVerifier
from app.application.services.pin_guard import PinGuard
from app.application.services.team_service import TeamService
from app.domain.enums import AccountRole, AccountStatus
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    IncorrectPinException,
    PhoneAlreadyRegisteredException,
    PhoneVerificationException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.conftest import PHONE_ISSUER, PHONE_PROJECT, make_phone_token


@pytest.fixture
def service(account_repo, pin_guard: PinGuard, hasher) -> TeamService:
    verifier = PhoneIdentityVerifier(project_id=PHONE_PROJECT, issuer=PHONE_ISSUER)
    return TeamService(account_repo, pin_guard, verifier, hasher)


@pytest.fixture
async def team(make_account):
    return {
        "owner": await make_account("+51900000001", role=AccountRole.OWNER, name="Owner"),
        "partner": await make_account("+51900000002", role=AccountRole.PARTNER, name="Partner"),
        "partner2": await make_account("+51900000003", role=AccountRole.PARTNER, name="Partner 2"),
        "employee": await make_account("+51900000004", role=AccountRole.EMPLOYEE, name="Employee"),
    }


class TestListMembers:
    async def test_owner_and_partner_list(self, service: TeamService, team) -> None:
        for actor in ("owner", "partner"):
            members = await service.list_members(team[actor].id)
            assert len(members) == 4

    async def test_employee_cannot_list(self, service: TeamService, team) -> None:
        with pytest.raises(AuthorizationException):
            await service.list_members(team["employee"].id)


class TestSetMemberStatus:
    async def test_partner_toggles_employee(self, service: TeamService, team) -> None:
        updated = await service.set_member_status(
            team["partner"].id, team["employee"].id, AccountStatus.DISABLED
        )
        assert updated.status == AccountStatus.DISABLED
        restored = await service.set_member_status(
            team["partner"].id, team["employee"].id, AccountStatus.ACTIVE
        )
        assert restored.status == AccountStatus.ACTIVE

    async def test_owner_toggles_partner(self, service: TeamService, team) -> None:
        updated = await service.set_member_status(
            team["owner"].id, team["partner"].id, AccountStatus.DISABLED
        )
        assert updated.status == AccountStatus.DISABLED

    async def test_partner_cannot_toggle_partner(self, service: TeamService, team) -> None:
        with pytest.raises(AuthorizationException):
            await service.set_member_status(
                team["partner"].id, team["partner2"].id, AccountStatus.DISABLED
            )

    @pytest.mark.parametrize("actor", ["owner", "partner"])
    async def test_nobody_toggles_owner(self, service: TeamService, team, actor: str) -> None:
        with pytest.raises(AuthorizationException):
            await service.set_member_status(team[actor].id, team["owner"].id, AccountStatus.DISABLED)

    async def test_cannot_toggle_self(self, service: TeamService, team) -> None:
        with pytest.raises(AuthorizationException):
            await service.set_member_status(
                team["partner"].id, team["partner"].id, AccountStatus.DISABLED
            )

    async def test_pending_is_not_a_target_status(self, service: TeamService, team) -> None:
        with pytest.raises(ValidationException):
            await service.set_member_status(team["owner"].id, team["employee"].id, AccountStatus.PENDING)

    async def test_unknown_member(self, service: TeamService, team) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.set_member_status(team["owner"].id, "missing", AccountStatus.DISABLED)

    async def test_disabled_actor_is_rejected(self, service: TeamService, account_repo, team) -> None:
        await account_repo.update_status(team["partner"].id, AccountStatus.DISABLED)
        with pytest.raises(AuthenticationException):
            await service.set_member_status(
                team["partner"].id, team["employee"].id, AccountStatus.DISABLED
            )


class TestChangeMemberPhone:
    async def test_owner_changes_member_phone(self, service: TeamService, account_repo, team) -> None:
        updated = await service.change_member_phone(team["owner"].id, team["employee"].id, "+51911112222")
        assert updated.phone_number == "+51911112222"
        assert updated.email == "51911112222@phone.local"
        assert await account_repo.get_by_phone("+51900000004") is None

    async def test_partner_cannot(self, service: TeamService, team) -> None:
        with pytest.raises(AuthorizationException):
            await service.change_member_phone(team["partner"].id, team["employee"].id, "+51911112222")

    async def test_number_in_use(self, service: TeamService, team) -> None:
        with pytest.raises(PhoneAlreadyRegisteredException):
            await service.change_member_phone(team["owner"].id, team["employee"].id, "+51900000002")

    async def test_same_number(self, service: TeamService, team) -> None:
        with pytest.raises(ValidationException):
            await service.change_member_phone(team["owner"].id, team["employee"].id, "+51900000004")


class TestChangeOwnPhone:
    async def test_requires_matching_proof(self, service: TeamService, team) -> None:
        with pytest.raises(PhoneVerificationException):
            await service.change_own_phone(
                team["employee"].id, "+51911112222", make_phone_token("+51933334444")
            )

    async def test_changes_phone_and_login(self, service: TeamService, account_repo, team) -> None:
        await service.change_own_phone(
            team["employee"].id, "+51911112222", make_phone_token("+51911112222")
        )
        assert await account_repo.authenticate("+51911112222", "member-password") is not None
        assert await account_repo.authenticate("+51900000004", "member-password") is None


class TestChangePin:
    async def test_change_pin(self, service: TeamService, account_repo, pin_guard: PinGuard, hasher, team) -> None:
        await pin_guard.start_session("emp_session")
        await service.change_pin(team["employee"].id, "emp_session", "1234", "5678")
        account = await account_repo.get_by_id(team["employee"].id)
        assert hasher.verify("5678", account.pin_hash)

    async def test_wrong_current_pin(self, service: TeamService, account_repo, pin_guard: PinGuard, hasher, team) -> None:
        await pin_guard.start_session("emp_session")
        with pytest.raises(IncorrectPinException):
            await service.change_pin(team["employee"].id, "emp_session", "0000", "5678")
        account = await account_repo.get_by_id(team["employee"].id)
        assert hasher.verify("1234", account.pin_hash)

    async def test_new_pin_shape(self, service: TeamService, pin_guard: PinGuard, team) -> None:
        await pin_guard.start_session("emp_session")
        with pytest.raises(ValidationException):
            await service.change_pin(team["employee"].id, "emp_session", "1234", "56789")
