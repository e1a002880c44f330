"""Repository mapping between store records and domain entities."""

from datetime import timedelta

import pytest

from app.application.dtos.account import AccountCreate
from app.core.constants import APP_CONFIG_ID
from app.domain.enums import AccountRole, AccountStatus, InviteRole, TransferStatus
from app.domain.exceptions import (
    DuplicateValueException,
    ResourceNotFoundException,
    UpstreamUnavailableException,
)
from app.infrastructure.store import InMemoryRecordStore, RecordStoreError
from app.infrastructure.store.collections import (
    COLLECTION_INVITE_CODES,
    COLLECTION_OWNERSHIP_TRANSFERS,
    COLLECTION_USERS,
)
from app.shared.utils.datetime import utc_now


def _account(phone: str, role: AccountRole = AccountRole.EMPLOYEE) -> AccountCreate:
    return AccountCreate(
        phone_number=phone,
        email=f"{phone.lstrip('+')}@phone.local",
        name="Ana",
        password="secret-password",
        pin_hash="a" * 64,
        role=role,
    )


class TestAccountRepository:
    async def test_round_trip_fields(self, account_repo) -> None:
        created = await account_repo.create(_account("+51900000001", AccountRole.PARTNER))
        fetched = await account_repo.get_by_phone("+51900000001")
        assert fetched.id == created.id
        assert fetched.role == AccountRole.PARTNER
        assert fetched.status == AccountStatus.ACTIVE
        assert fetched.pin_hash == "a" * 64
        assert fetched.invited_by is None
        assert fetched.phone_verified
        assert fetched.created is not None

    async def test_duplicate_phone(self, account_repo) -> None:
        await account_repo.create(_account("+51900000001"))
        with pytest.raises(DuplicateValueException) as exc_info:
            await account_repo.create(_account("+51900000001"))
        assert exc_info.value.details["field"] == "phoneNumber"

    async def test_get_owner(self, account_repo) -> None:
        assert await account_repo.get_owner() is None
        owner = await account_repo.create(_account("+51900000001", AccountRole.OWNER))
        assert (await account_repo.get_owner()).id == owner.id

    async def test_update_missing_account(self, account_repo) -> None:
        with pytest.raises(ResourceNotFoundException):
            await account_repo.update_status("missing", AccountStatus.DISABLED)

    async def test_unknown_role_is_upstream_failure(self, account_repo, record_store: InMemoryRecordStore) -> None:
        record = await record_store.create(
            COLLECTION_USERS,
            {"email": "x@phone.local", "role": "superadmin", "status": "active", "password": "pw"},
        )
        with pytest.raises(UpstreamUnavailableException):
            await account_repo.get_by_id(record["id"])

    async def test_missing_status_is_upstream_failure(self, account_repo, record_store) -> None:
        record = await record_store.create(
            COLLECTION_USERS, {"email": "x@phone.local", "role": "owner", "status": "", "password": "pw"}
        )
        with pytest.raises(UpstreamUnavailableException):
            await account_repo.get_by_id(record["id"])

    async def test_store_failure_maps_to_upstream(self, account_repo, record_store, monkeypatch) -> None:
        async def broken(*args, **kwargs):
            raise RecordStoreError("connection refused")

        monkeypatch.setattr(record_store, "first", broken)
        with pytest.raises(UpstreamUnavailableException) as exc_info:
            await account_repo.get_by_phone("+51900000001")
        assert exc_info.value.details == {"operation": "get_account_by_phone"}


class TestInviteCodeRepository:
    async def test_mark_used(self, invite_repo) -> None:
        invite = await invite_repo.create("AB12CD", InviteRole.EMPLOYEE, "owner1", utc_now() + timedelta(days=7))
        assert not invite.used and invite.used_by is None
        used = await invite_repo.mark_used(invite.id, "acc9")
        assert used.used and used.used_by == "acc9"

    async def test_bad_expiry_is_upstream_failure(self, invite_repo, record_store) -> None:
        record = await record_store.create(
            COLLECTION_INVITE_CODES,
            {"code": "AB12CD", "role": "employee", "createdBy": "o1", "expiresAt": "tomorrow"},
        )
        with pytest.raises(UpstreamUnavailableException):
            await invite_repo.get_by_id(record["id"])

    async def test_delete_missing(self, invite_repo) -> None:
        with pytest.raises(ResourceNotFoundException):
            await invite_repo.delete("missing")


class TestOwnershipTransferRepository:
    async def test_create_and_save_state(self, transfer_repo) -> None:
        transfer = await transfer_repo.create("AB12CD34", "owner1", "+51955555555", utc_now() + timedelta(hours=24))
        assert transfer.status == TransferStatus.PENDING
        assert transfer.to_user is None and transfer.accepted_at is None

        transfer.accept("acc2", utc_now())
        saved = await transfer_repo.save_state(transfer)
        assert saved.status == TransferStatus.ACCEPTED
        assert saved.to_user == "acc2"
        assert saved.accepted_at is not None
        assert saved.completed_at is None

    async def test_list_live_for_owner(self, transfer_repo) -> None:
        expires = utc_now() + timedelta(hours=24)
        live = await transfer_repo.create("LIVE0001", "owner1", "+51955555555", expires)
        done = await transfer_repo.create("DONE0001", "owner1", "+51955555555", expires)
        done.cancel(utc_now())
        await transfer_repo.save_state(done)
        await transfer_repo.create("OTHR0001", "owner2", "+51955555555", expires)

        found = await transfer_repo.list_live_for_owner("owner1")
        assert [t.id for t in found] == [live.id]

    async def test_unknown_status_is_upstream_failure(self, transfer_repo, record_store) -> None:
        await record_store.create(
            COLLECTION_OWNERSHIP_TRANSFERS,
            {
                "code": "BAD00001",
                "fromUser": "o1",
                "toPhone": "+51955555555",
                "status": "paused",
                "expiresAt": "2030-01-01 00:00:00.000Z",
            },
        )
        with pytest.raises(UpstreamUnavailableException):
            await transfer_repo.get_by_code("BAD00001")


class TestAppConfigRepository:
    async def test_mark_setup_complete_creates_singleton(self, app_config_repo) -> None:
        assert await app_config_repo.get() is None
        config = await app_config_repo.mark_setup_complete()
        assert config.id == APP_CONFIG_ID
        assert config.setup_complete

    async def test_mark_setup_complete_updates_existing(self, app_config_repo, record_store) -> None:
        await record_store.create("app_config", {"id": "existingcfg0001", "setupComplete": False})
        config = await app_config_repo.mark_setup_complete()
        assert config.id == "existingcfg0001"
        assert (await app_config_repo.get()).setup_complete
