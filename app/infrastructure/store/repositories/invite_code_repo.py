"""Record-store-backed invite code repository (implements IInviteCodeRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.domain.entities import InviteCodeEntity
from app.domain.enums import InviteRole
from app.infrastructure.store.collections import COLLECTION_INVITE_CODES
from app.infrastructure.store.filters import and_, eq, gt
from app.infrastructure.store.protocol import IRecordStore
from app.infrastructure.store.repositories._base import RecordReader, store_errors
from app.shared.utils.datetime import format_store_datetime


class InviteCodeRepository:
    def __init__(self, store: IRecordStore) -> None:
        self._store = store

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> InviteCodeEntity:
        r = RecordReader(COLLECTION_INVITE_CODES, record)
        return InviteCodeEntity(
            id=r.id,
            code=r.text("code"),
            role=r.choice("role", InviteRole),
            created_by=r.text("createdBy"),
            expires_at=r.timestamp("expiresAt"),
            used=r.flag("used"),
            used_by=r.text("usedBy", required=False),
            created=r.timestamp("created", required=False),
        )

    async def get_by_id(self, invite_id: str) -> InviteCodeEntity | None:
        async with store_errors(COLLECTION_INVITE_CODES, "get_invite"):
            record = await self._store.get(COLLECTION_INVITE_CODES, invite_id)
            return self._to_entity(record) if record else None

    async def get_by_code(self, code: str) -> InviteCodeEntity | None:
        async with store_errors(COLLECTION_INVITE_CODES, "get_invite_by_code"):
            record = await self._store.first(COLLECTION_INVITE_CODES, eq("code", code))
            return self._to_entity(record) if record else None

    async def list_pending(self, now: datetime) -> list[InviteCodeEntity]:
        async with store_errors(COLLECTION_INVITE_CODES, "list_invites"):
            records = await self._store.list(
                COLLECTION_INVITE_CODES,
                and_(eq("used", False), gt("expiresAt", now)),
                sort="-created",
            )
            return [self._to_entity(r) for r in records]

    async def create(
        self, code: str, role: InviteRole, created_by: str, expires_at: datetime
    ) -> InviteCodeEntity:
        fields = {
            "code": code,
            "role": role.value,
            "createdBy": created_by,
            "expiresAt": format_store_datetime(expires_at),
            "used": False,
            "usedBy": "",
        }
        async with store_errors(COLLECTION_INVITE_CODES, "create_invite"):
            record = await self._store.create(COLLECTION_INVITE_CODES, fields)
            return self._to_entity(record)

    async def mark_used(self, invite_id: str, used_by: str) -> InviteCodeEntity:
        async with store_errors(COLLECTION_INVITE_CODES, "mark_invite_used"):
            record = await self._store.update(
                COLLECTION_INVITE_CODES, invite_id, {"used": True, "usedBy": used_by}
            )
            return self._to_entity(record)

    async def delete(self, invite_id: str) -> None:
        async with store_errors(COLLECTION_INVITE_CODES, "delete_invite"):
            await self._store.delete(COLLECTION_INVITE_CODES, invite_id)
