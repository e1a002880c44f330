"""Record-store-backed account repository (implements IAccountRepository)."""

from __future__ import annotations

from typing import Any

from app.application.dtos.account import AccountCreate
from app.domain.entities import AccountEntity
from app.domain.enums import AccountRole, AccountStatus
from app.domain.value_objects.phone import PhoneNumber, is_valid_e164
from app.infrastructure.store.collections import COLLECTION_USERS
from app.infrastructure.store.filters import eq
from app.infrastructure.store.protocol import IRecordStore
from app.infrastructure.store.repositories._base import RecordReader, store_errors


class AccountRepository:
    """Accounts live in the store's auth collection; the store owns the password."""

    def __init__(self, store: IRecordStore) -> None:
        self._store = store

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> AccountEntity:
        r = RecordReader(COLLECTION_USERS, record)
        return AccountEntity(
            id=r.id,
            phone_number=r.text("phoneNumber", required=False),
            email=r.text("email"),
            name=r.text("name", required=False) or "",
            role=r.choice("role", AccountRole),
            status=r.choice("status", AccountStatus),
            pin_hash=r.text("pin", required=False),
            invited_by=r.text("invitedBy", required=False),
            phone_verified=r.flag("phoneVerified"),
            created=r.timestamp("created", required=False),
            updated=r.timestamp("updated", required=False),
        )

    async def get_by_id(self, account_id: str) -> AccountEntity | None:
        async with store_errors(COLLECTION_USERS, "get_account"):
            record = await self._store.get(COLLECTION_USERS, account_id)
            return self._to_entity(record) if record else None

    async def get_by_phone(self, phone_number: str) -> AccountEntity | None:
        async with store_errors(COLLECTION_USERS, "get_account_by_phone"):
            record = await self._store.first(COLLECTION_USERS, eq("phoneNumber", phone_number))
            return self._to_entity(record) if record else None

    async def get_owner(self) -> AccountEntity | None:
        async with store_errors(COLLECTION_USERS, "get_owner"):
            record = await self._store.first(COLLECTION_USERS, eq("role", AccountRole.OWNER.value))
            return self._to_entity(record) if record else None

    async def list_all(self) -> list[AccountEntity]:
        async with store_errors(COLLECTION_USERS, "list_accounts"):
            records = await self._store.list(COLLECTION_USERS, sort="-created")
            return [self._to_entity(r) for r in records]

    async def create(self, data: AccountCreate) -> AccountEntity:
        fields = {
            "phoneNumber": data.phone_number,
            "email": data.email,
            "emailVisibility": False,
            "name": data.name,
            "password": data.password,
            "passwordConfirm": data.password,
            "pin": data.pin_hash,
            "role": data.role.value,
            "status": data.status.value,
            "invitedBy": data.invited_by or "",
            "phoneVerified": data.phone_verified,
        }
        async with store_errors(COLLECTION_USERS, "create_account"):
            record = await self._store.create(COLLECTION_USERS, fields)
            return self._to_entity(record)

    async def authenticate(self, phone_number: str, password: str) -> AccountEntity | None:
        if not is_valid_e164(phone_number):
            return None
        async with store_errors(COLLECTION_USERS, "authenticate"):
            record = await self._store.authenticate(
                COLLECTION_USERS, PhoneNumber(phone_number).auth_email, password
            )
            return self._to_entity(record) if record else None

    async def _update(self, account_id: str, fields: dict[str, Any], operation: str) -> AccountEntity:
        async with store_errors(COLLECTION_USERS, operation):
            record = await self._store.update(COLLECTION_USERS, account_id, fields)
            return self._to_entity(record)

    async def update_role(self, account_id: str, role: AccountRole) -> AccountEntity:
        return await self._update(account_id, {"role": role.value}, "update_role")

    async def update_status(self, account_id: str, status: AccountStatus) -> AccountEntity:
        return await self._update(account_id, {"status": status.value}, "update_status")

    async def update_phone(
        self, account_id: str, phone_number: str, phone_verified: bool
    ) -> AccountEntity:
        fields = {
            "phoneNumber": phone_number,
            "email": PhoneNumber(phone_number).auth_email,
            "phoneVerified": phone_verified,
        }
        return await self._update(account_id, fields, "update_phone")

    async def update_pin(self, account_id: str, pin_hash: str) -> AccountEntity:
        return await self._update(account_id, {"pin": pin_hash}, "update_pin")
