"""Record store client lifecycle.

Initialized at app startup from settings.record_store_backend:
"pocketbase" (REST with superuser credentials) or "memory" (development
and tests). Closed at shutdown.
"""

import logging

from app.core.config import get_settings
from app.infrastructure.store.memory_store import InMemoryRecordStore
from app.infrastructure.store.pocketbase_client import PocketBaseRecordStore
from app.infrastructure.store.protocol import IRecordStore

logger = logging.getLogger(__name__)

_record_store: IRecordStore | None = None


def init_record_store() -> IRecordStore:
    """Create the configured record store. Idempotent if already initialized."""
    global _record_store
    if _record_store is not None:
        return _record_store
    settings = get_settings()
    if settings.record_store_backend == "memory":
        logger.warning("Using in-memory record store; data is lost on restart")
        _record_store = InMemoryRecordStore()
    else:
        _record_store = PocketBaseRecordStore(
            settings.pocketbase_url,
            settings.pocketbase_admin_email,
            settings.pocketbase_admin_password.get_secret_value(),
            timeout=settings.store_timeout_seconds,
        )
        logger.info("PocketBase record store configured at %s", settings.pocketbase_url)
    return _record_store


def get_record_store() -> IRecordStore:
    """Return the record store, initializing it on first use."""
    return _record_store if _record_store is not None else init_record_store()


def set_record_store(store: IRecordStore | None) -> None:
    """Replace the process-wide store (tests inject a fresh in-memory store)."""
    global _record_store
    _record_store = store


async def close_record_store() -> None:
    """Close the store's HTTP connection pool. Call from app shutdown."""
    global _record_store
    if _record_store is not None:
        await _record_store.aclose()
        _record_store = None
        logger.info("Record store closed")
