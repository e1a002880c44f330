"""Record-store-backed ownership transfer repository (implements IOwnershipTransferRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.domain.entities import OwnershipTransferEntity
from app.domain.enums import TransferStatus
from app.infrastructure.store.collections import COLLECTION_OWNERSHIP_TRANSFERS
from app.infrastructure.store.filters import and_, eq, ne
from app.infrastructure.store.protocol import IRecordStore
from app.infrastructure.store.repositories._base import RecordReader, store_errors
from app.shared.utils.datetime import format_store_datetime


def _fmt(value: datetime | None) -> str:
    return format_store_datetime(value) if value is not None else ""


class OwnershipTransferRepository:
    def __init__(self, store: IRecordStore) -> None:
        self._store = store

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> OwnershipTransferEntity:
        r = RecordReader(COLLECTION_OWNERSHIP_TRANSFERS, record)
        return OwnershipTransferEntity(
            id=r.id,
            code=r.text("code"),
            from_user=r.text("fromUser"),
            to_phone=r.text("toPhone"),
            status=r.choice("status", TransferStatus),
            expires_at=r.timestamp("expiresAt"),
            to_user=r.text("toUser", required=False),
            accepted_at=r.timestamp("acceptedAt", required=False),
            completed_at=r.timestamp("completedAt", required=False),
            created=r.timestamp("created", required=False),
        )

    async def get_by_code(self, code: str) -> OwnershipTransferEntity | None:
        async with store_errors(COLLECTION_OWNERSHIP_TRANSFERS, "get_transfer"):
            record = await self._store.first(COLLECTION_OWNERSHIP_TRANSFERS, eq("code", code))
            return self._to_entity(record) if record else None

    async def list_live_for_owner(self, owner_id: str) -> list[OwnershipTransferEntity]:
        live = and_(
            eq("fromUser", owner_id),
            ne("status", TransferStatus.COMPLETED.value),
            ne("status", TransferStatus.EXPIRED.value),
            ne("status", TransferStatus.CANCELLED.value),
        )
        async with store_errors(COLLECTION_OWNERSHIP_TRANSFERS, "list_live_transfers"):
            records = await self._store.list(COLLECTION_OWNERSHIP_TRANSFERS, live, sort="-created")
            return [self._to_entity(r) for r in records]

    async def create(
        self, code: str, from_user: str, to_phone: str, expires_at: datetime
    ) -> OwnershipTransferEntity:
        fields = {
            "code": code,
            "fromUser": from_user,
            "toPhone": to_phone,
            "toUser": "",
            "status": TransferStatus.PENDING.value,
            "expiresAt": format_store_datetime(expires_at),
            "acceptedAt": "",
            "completedAt": "",
        }
        async with store_errors(COLLECTION_OWNERSHIP_TRANSFERS, "create_transfer"):
            record = await self._store.create(COLLECTION_OWNERSHIP_TRANSFERS, fields)
            return self._to_entity(record)

    async def save_state(self, transfer: OwnershipTransferEntity) -> OwnershipTransferEntity:
        fields = {
            "status": transfer.status.value,
            "toUser": transfer.to_user or "",
            "acceptedAt": _fmt(transfer.accepted_at),
            "completedAt": _fmt(transfer.completed_at),
        }
        async with store_errors(COLLECTION_OWNERSHIP_TRANSFERS, "save_transfer"):
            record = await self._store.update(COLLECTION_OWNERSHIP_TRANSFERS, transfer.id, fields)
            return self._to_entity(record)
