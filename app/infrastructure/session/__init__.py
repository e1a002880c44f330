"""Session-state store: PIN guard counters and remembered identities.

Backend chosen by settings.session_store_backend ("memory" or "redis").
"""

import logging

from app.application.interfaces.services import ISessionStateStore
from app.core.config import get_settings
from app.infrastructure.session.memory_store import MemorySessionStateStore
from app.infrastructure.session.redis_store import RedisSessionStateStore

logger = logging.getLogger(__name__)

_session_store: MemorySessionStateStore | RedisSessionStateStore | None = None


async def init_session_store() -> ISessionStateStore:
    """Create (and for Redis, connect) the configured store. Idempotent."""
    global _session_store
    if _session_store is not None:
        return _session_store
    if get_settings().session_store_backend == "redis":
        store = RedisSessionStateStore()
        await store.connect()
        _session_store = store
    else:
        logger.info("Using in-memory session-state store")
        _session_store = MemorySessionStateStore()
    return _session_store


def get_session_store() -> ISessionStateStore:
    """Return the store; falls back to an in-memory store if startup did not run."""
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStateStore()
    return _session_store


def set_session_store(store: MemorySessionStateStore | RedisSessionStateStore | None) -> None:
    global _session_store
    _session_store = store


async def close_session_store() -> None:
    global _session_store
    if _session_store is not None:
        await _session_store.close()
        _session_store = None


__all__ = [
    "MemorySessionStateStore",
    "RedisSessionStateStore",
    "close_session_store",
    "get_session_store",
    "init_session_store",
    "set_session_store",
]
