"""In-memory record store for development and tests.

Honors the unique and partial-unique constraints declared in
collections.py and hashes auth-collection passwords with bcrypt, so the
identity core sees the same contract as against the real store.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any

from app.infrastructure.security.password import get_dummy_hash, get_password_hash, verify_password
from app.infrastructure.store.collections import CollectionSchema, get_schema
from app.infrastructure.store.errors import RecordConflictError, RecordNotFoundError
from app.infrastructure.store.filters import Filter, matches
from app.shared.utils.datetime import format_store_datetime, utc_now
from app.shared.utils.generators import generate_record_id

_WRITE_ONLY_FIELDS = ("password", "passwordConfirm")


def _sort_records(records: list[dict[str, Any]], sort: str | None) -> list[dict[str, Any]]:
    if not sort:
        return records
    for key in reversed([s.strip() for s in sort.split(",") if s.strip()]):
        descending = key.startswith("-")
        name = key.lstrip("-+")
        records = sorted(records, key=lambda r: (r.get(name) is None, r.get(name) or ""), reverse=descending)
    return records


class InMemoryRecordStore:
    """IRecordStore over dicts guarded by an asyncio.Lock."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    def _records(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _public(schema: CollectionSchema, record: dict[str, Any]) -> dict[str, Any]:
        return {k: copy.deepcopy(v) for k, v in record.items() if k not in schema.hidden}

    def _check_unique(
        self, schema: CollectionSchema, candidate: dict[str, Any], exclude_id: str | None
    ) -> None:
        others = [r for rid, r in self._records(schema.name).items() if rid != exclude_id]
        for field_name in schema.unique:
            value = candidate.get(field_name)
            if value in (None, ""):
                continue
            if any(r.get(field_name) == value for r in others):
                raise RecordConflictError(schema.name, field_name)
        for field_name, value in schema.partial_unique:
            if candidate.get(field_name) == value and any(r.get(field_name) == value for r in others):
                raise RecordConflictError(schema.name, field_name)

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        schema = get_schema(collection)
        record = self._records(collection).get(record_id)
        return self._public(schema, record) if record is not None else None

    async def list(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        schema = get_schema(collection)
        now = utc_now()
        found = [r for r in self._records(collection).values() if matches(filter_, r, now)]
        found = _sort_records(found, sort)
        if limit is not None:
            found = found[:limit]
        return [self._public(schema, r) for r in found]

    async def first(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
    ) -> dict[str, Any] | None:
        items = await self.list(collection, filter_, sort, limit=1)
        return items[0] if items else None

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        schema = get_schema(collection)
        record = {k: copy.deepcopy(v) for k, v in fields.items() if k not in _WRITE_ONLY_FIELDS}
        if schema.auth:
            record["passwordHash"] = await asyncio.to_thread(get_password_hash, fields.get("password", ""))
        async with self._lock:
            record_id = record.get("id") or generate_record_id()
            if record_id in self._records(collection):
                raise RecordConflictError(collection, "id")
            stamp = format_store_datetime(utc_now())
            record.update({"id": record_id, "created": stamp, "updated": stamp})
            self._check_unique(schema, record, exclude_id=None)
            self._records(collection)[record_id] = record
            return self._public(schema, record)

    async def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        schema = get_schema(collection)
        async with self._lock:
            current = self._records(collection).get(record_id)
            if current is None:
                raise RecordNotFoundError(collection, record_id)
            candidate = {**current, **{k: copy.deepcopy(v) for k, v in fields.items() if k not in ("id", "created")}}
            candidate["updated"] = format_store_datetime(utc_now())
            self._check_unique(schema, candidate, exclude_id=record_id)
            self._records(collection)[record_id] = candidate
            return self._public(schema, candidate)

    async def delete(self, collection: str, record_id: str) -> None:
        async with self._lock:
            if self._records(collection).pop(record_id, None) is None:
                raise RecordNotFoundError(collection, record_id)

    async def authenticate(
        self, collection: str, identity: str, password: str
    ) -> dict[str, Any] | None:
        schema = get_schema(collection)
        record = next(
            (r for r in self._records(collection).values() if r.get("email") == identity),
            None,
        )
        if record is None:
            await asyncio.to_thread(verify_password, password, await get_dummy_hash())
            return None
        if not await asyncio.to_thread(verify_password, password, record.get("passwordHash", "")):
            return None
        return self._public(schema, record)

    async def aclose(self) -> None:
        return None
