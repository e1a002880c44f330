"""Record store port used by the repositories.

Records are plain string-keyed dicts as the store returns them (id,
created, updated plus collection fields). Only repositories touch them.
"""

from __future__ import annotations

from typing import Any, Protocol

from app.infrastructure.store.filters import Filter


class IRecordStore(Protocol):
    """Generic document store with filter/sort/CRUD.

    get returns None for a missing record; update/delete raise
    RecordNotFoundError; writes raise RecordConflictError on unique
    violations; transport failures raise RecordStoreError.
    """

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return the record or None."""

    async def list(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return matching records; sort like "-created" (leading '-' = descending)."""

    async def first(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
    ) -> dict[str, Any] | None:
        """Return the first matching record or None."""

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Create a record; fields may include "id". Returns the stored record."""

    async def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Patch fields of a record. Returns the stored record."""

    async def delete(self, collection: str, record_id: str) -> None:
        """Delete a record."""

    async def authenticate(
        self, collection: str, identity: str, password: str
    ) -> dict[str, Any] | None:
        """Verify an auth record's password; return the record or None."""

    async def aclose(self) -> None:
        """Release connections."""
