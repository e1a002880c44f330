"""In-process session-state store with per-key expiry."""

from __future__ import annotations

import copy
import time
from typing import Any


class MemorySessionStateStore:
    """ISessionStateStore over a dict; entries expire lazily on read.

    Single-process only: state is lost on restart and not shared between
    workers. Use the Redis store for multi-worker deployments.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}
        self._clock = clock

    async def get(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        self._entries[key] = (self._clock() + ttl, copy.deepcopy(value))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def close(self) -> None:
        self._entries.clear()
