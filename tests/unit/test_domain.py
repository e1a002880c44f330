"""Domain entities, enums, value objects and exceptions."""

from datetime import UTC, datetime, timedelta

import pytest

from app.domain.entities import AccountEntity, InviteCodeEntity, OwnershipTransferEntity
from app.domain.enums import AccountRole, AccountStatus, InviteRole, TransferStatus
from app.domain.exceptions import (
    IdentityException,
    IncorrectPinException,
    InvalidCodeException,
    PinLockedOutException,
    ResourceNotFoundException,
    TransferNotActiveException,
    ValidationException,
)
from app.domain.value_objects.phone import PhoneNumber, is_valid_e164

NOW = datetime(2025, 5, 1, 12, 0, tzinfo=UTC)


def _account(account_id: str, role: AccountRole, status: AccountStatus = AccountStatus.ACTIVE) -> AccountEntity:
    return AccountEntity(
        id=account_id,
        phone_number="+51900000000",
        email=f"{account_id}@phone.local",
        name=account_id,
        role=role,
        status=status,
    )


def _transfer(status: TransferStatus = TransferStatus.PENDING, expires_in: timedelta = timedelta(hours=1)):
    return OwnershipTransferEntity(
        id="t1",
        code="AB12CD34",
        from_user="owner",
        to_phone="+51955555555",
        status=status,
        expires_at=NOW + expires_in,
    )


class TestPhoneNumber:
    @pytest.mark.parametrize("value", ["+51987654321", "+14155238886", "+4930123456"])
    def test_valid(self, value: str) -> None:
        assert is_valid_e164(value)
        assert str(PhoneNumber(value)) == value

    @pytest.mark.parametrize("value", [None, "", "51987654321", "+0987654321", "+51 987 654", "+51987654321\n"])
    def test_invalid(self, value: str | None) -> None:
        assert not is_valid_e164(value)

    def test_constructor_rejects_invalid(self) -> None:
        with pytest.raises(ValueError):
            PhoneNumber("987")

    def test_auth_email_and_mask(self) -> None:
        phone = PhoneNumber("+51987654321")
        assert phone.auth_email == "51987654321@phone.local"
        assert phone.masked == "+51*****4321"


class TestAccountEntity:
    def test_requires_id_and_email(self) -> None:
        with pytest.raises(ValidationException):
            AccountEntity(id="", phone_number=None, email="x", name="", role=AccountRole.OWNER, status=AccountStatus.ACTIVE)
        with pytest.raises(ValidationException):
            AccountEntity(id="a", phone_number=None, email="", name="", role=AccountRole.OWNER, status=AccountStatus.ACTIVE)

    def test_toggle_rules(self) -> None:
        owner = _account("owner", AccountRole.OWNER)
        partner = _account("partner", AccountRole.PARTNER)
        other_partner = _account("partner2", AccountRole.PARTNER)
        employee = _account("employee", AccountRole.EMPLOYEE)

        assert owner.can_toggle(partner)
        assert owner.can_toggle(employee)
        assert partner.can_toggle(employee)
        assert not partner.can_toggle(other_partner)
        assert not partner.can_toggle(owner)
        assert not owner.can_toggle(owner)
        assert not employee.can_toggle(employee)

    def test_disabled_manager_cannot_toggle(self) -> None:
        partner = _account("partner", AccountRole.PARTNER, AccountStatus.DISABLED)
        assert not partner.can_toggle(_account("employee", AccountRole.EMPLOYEE))


class TestInviteCodeEntity:
    def test_validity(self) -> None:
        invite = InviteCodeEntity(
            id="i1", code="AB12CD", role=InviteRole.EMPLOYEE, created_by="o", expires_at=NOW + timedelta(days=1)
        )
        assert invite.is_valid(NOW)
        assert invite.invalid_reason(NOW + timedelta(days=1)) == "expired"
        invite.used = True
        assert invite.invalid_reason(NOW) == "used"

    def test_invite_role_never_owner(self) -> None:
        assert "owner" not in InviteRole.values()
        assert InviteRole.PARTNER.to_account_role() == AccountRole.PARTNER


class TestOwnershipTransferEntity:
    def test_terminal_statuses(self) -> None:
        assert {s for s in TransferStatus if s.is_terminal} == {
            TransferStatus.COMPLETED,
            TransferStatus.EXPIRED,
            TransferStatus.CANCELLED,
        }

    def test_lazy_expiry(self) -> None:
        transfer = _transfer(expires_in=timedelta(seconds=-1))
        assert transfer.status == TransferStatus.PENDING
        assert transfer.effective_status(NOW) == TransferStatus.EXPIRED
        assert transfer.is_stale(NOW)
        assert not transfer.is_live(NOW)

    def test_terminal_status_is_not_rewritten(self) -> None:
        transfer = _transfer(TransferStatus.COMPLETED, expires_in=timedelta(seconds=-1))
        assert transfer.effective_status(NOW) == TransferStatus.COMPLETED
        assert not transfer.is_stale(NOW)

    def test_happy_path(self) -> None:
        transfer = _transfer()
        transfer.accept("recipient", NOW)
        assert transfer.status == TransferStatus.ACCEPTED
        assert transfer.accepted_at == NOW
        transfer.complete(NOW)
        assert transfer.status == TransferStatus.COMPLETED
        assert transfer.completed_at == NOW

    def test_complete_requires_accepted(self) -> None:
        with pytest.raises(TransferNotActiveException):
            _transfer().complete(NOW)

    def test_cannot_accept_after_expiry(self) -> None:
        with pytest.raises(TransferNotActiveException) as exc_info:
            _transfer(expires_in=timedelta(0)).accept("recipient", NOW)
        assert exc_info.value.details == {"status": "expired"}

    @pytest.mark.parametrize("status", [TransferStatus.PENDING, TransferStatus.ACCEPTED])
    def test_cancel_live(self, status: TransferStatus) -> None:
        transfer = _transfer(status)
        transfer.cancel(NOW)
        assert transfer.status == TransferStatus.CANCELLED

    def test_cancel_terminal(self) -> None:
        with pytest.raises(TransferNotActiveException):
            _transfer(TransferStatus.CANCELLED).cancel(NOW)


class TestExceptions:
    def test_to_dict_shape(self) -> None:
        exc = IncorrectPinException(attempts_remaining=2)
        body = exc.to_dict()
        assert body["error"] == "INCORRECT_PIN"
        assert body["details"] == {"attempts_remaining": 2}
        assert "2" in body["message"]

    def test_lockout_message_carries_seconds(self) -> None:
        assert "30" in PinLockedOutException(30).message

    def test_invalid_code_has_no_reason(self) -> None:
        exc = InvalidCodeException()
        assert exc.error_code == "INVALID_CODE"
        assert exc.details == {}

    def test_not_found_details(self) -> None:
        exc = ResourceNotFoundException("invite", "i1")
        assert exc.details == {"resource_type": "invite", "resource_id": "i1"}

    def test_default_error_code_is_class_name(self) -> None:
        assert IdentityException("boom").error_code == "IdentityException"
