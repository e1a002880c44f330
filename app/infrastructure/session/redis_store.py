"""Redis-backed session-state store.

Values are JSON objects stored with SETEX. Unlike a cache, a missing
Redis is not silently ignored: PIN lockout counters must not reset because
the store is down, so connection failures surface as
UpstreamUnavailableException after one reconnect attempt.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from app.core.config import get_settings
from app.domain.exceptions import UpstreamUnavailableException

logger = logging.getLogger(__name__)


class RedisSessionStateStore:
    """ISessionStateStore over redis.asyncio. Call connect() at startup and close() at shutdown."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        self.redis = redis_client
        self.settings = get_settings()

    async def connect(self) -> None:
        """Create the client and ping it; a failed ping is logged and retried on first use."""
        if self.redis is not None:
            return
        password = self.settings.redis_password
        self.redis = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await self.redis.ping()
            logger.info(
                "Redis session store connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis session store not reachable at startup: %s", e)

    async def close(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis session store disconnected")

    async def _client(self) -> redis.Redis:
        if self.redis is None:
            await self.connect()
        return self.redis

    async def _reconnect(self) -> None:
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        await self.connect()

    async def _run(self, operation: str, call):
        """Run call(client); reconnect once on connection errors, then fail as upstream."""
        try:
            return await call(await self._client())
        except (redis.ConnectionError, redis.TimeoutError):
            logger.warning("Redis %s failed; reconnecting", operation)
        except redis.RedisError as e:
            logger.error("Redis %s failed: %s", operation, e)
            raise UpstreamUnavailableException("session_state") from None
        try:
            await self._reconnect()
            return await call(await self._client())
        except redis.RedisError as e:
            logger.error("Redis %s failed after reconnect: %s", operation, e)
            raise UpstreamUnavailableException("session_state") from None

    async def get(self, key: str) -> dict[str, Any] | None:
        raw = await self._run("get", lambda client: client.get(key))
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Discarding unreadable session state under %s", key)
            return None
        return value if isinstance(value, dict) else None

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        payload = json.dumps(value)
        await self._run("set", lambda client: client.setex(key, ttl, payload))

    async def delete(self, key: str) -> None:
        await self._run("delete", lambda client: client.delete(key))
