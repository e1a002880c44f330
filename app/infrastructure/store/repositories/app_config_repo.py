"""Record-store-backed app_config singleton repository (implements IAppConfigRepository)."""

from __future__ import annotations

from typing import Any

from app.core.constants import APP_CONFIG_ID
from app.domain.entities import AppConfigEntity
from app.infrastructure.store.collections import COLLECTION_APP_CONFIG
from app.infrastructure.store.protocol import IRecordStore
from app.infrastructure.store.repositories._base import RecordReader, store_errors


class AppConfigRepository:
    """Reads the first app_config record; writes the fixed singleton id when creating."""

    def __init__(self, store: IRecordStore) -> None:
        self._store = store

    @staticmethod
    def _to_entity(record: dict[str, Any]) -> AppConfigEntity:
        r = RecordReader(COLLECTION_APP_CONFIG, record)
        return AppConfigEntity(id=r.id, setup_complete=r.flag("setupComplete"))

    async def get(self) -> AppConfigEntity | None:
        async with store_errors(COLLECTION_APP_CONFIG, "get_app_config"):
            record = await self._store.first(COLLECTION_APP_CONFIG)
            return self._to_entity(record) if record else None

    async def mark_setup_complete(self) -> AppConfigEntity:
        current = await self.get()
        async with store_errors(COLLECTION_APP_CONFIG, "mark_setup_complete"):
            if current is None:
                record = await self._store.create(
                    COLLECTION_APP_CONFIG, {"id": APP_CONFIG_ID, "setupComplete": True}
                )
            else:
                record = await self._store.update(
                    COLLECTION_APP_CONFIG, current.id, {"setupComplete": True}
                )
            return self._to_entity(record)
