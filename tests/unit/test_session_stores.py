"""Session-state stores: in-memory TTL and Redis failure handling."""

import json

import pytest
import redis.asyncio as redis

from app.domain.exceptions import UpstreamUnavailableException
from app.infrastructure.session import redis_store as redis_module
from app.infrastructure.session.memory_store import MemorySessionStateStore
from app.infrastructure.session.redis_store import RedisSessionStateStore


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the session store."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.data: dict[str, str] = {}
        self.fail_with = fail_with
        self.closed = False

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def ping(self) -> bool:
        self._check()
        return True

    async def get(self, key: str) -> str | None:
        self._check()
        return self.data.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._check()
        self.data[key] = value
        return True

    async def delete(self, key: str) -> int:
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    async def aclose(self) -> None:
        self.closed = True


class TestMemorySessionStateStore:
    async def test_set_get_delete(self) -> None:
        store = MemorySessionStateStore()
        await store.set("k", {"state": "unlocked"}, ttl=60)
        assert await store.get("k") == {"state": "unlocked"}
        await store.delete("k")
        assert await store.get("k") is None

    async def test_entries_expire(self) -> None:
        clock = FakeClock()
        store = MemorySessionStateStore(clock=clock)
        await store.set("k", {"a": 1}, ttl=30)
        clock.now += 29
        assert await store.get("k") == {"a": 1}
        clock.now += 1
        assert await store.get("k") is None

    async def test_values_are_copied(self) -> None:
        store = MemorySessionStateStore()
        value = {"nested": {"n": 1}}
        await store.set("k", value, ttl=60)
        value["nested"]["n"] = 2
        assert (await store.get("k"))["nested"]["n"] == 1


class TestRedisSessionStateStore:
    async def test_values_are_json(self) -> None:
        client = FakeRedis()
        store = RedisSessionStateStore(redis_client=client)
        await store.set("pin_session:s1", {"state": "pin_required"}, ttl=60)
        assert json.loads(client.data["pin_session:s1"]) == {"state": "pin_required"}
        assert await store.get("pin_session:s1") == {"state": "pin_required"}
        await store.delete("pin_session:s1")
        assert await store.get("pin_session:s1") is None

    async def test_unreadable_value_is_discarded(self) -> None:
        client = FakeRedis()
        client.data["k"] = "not json"
        assert await RedisSessionStateStore(redis_client=client).get("k") is None

    async def test_reconnects_once_on_connection_error(self, monkeypatch) -> None:
        broken = FakeRedis(fail_with=redis.ConnectionError("reset"))
        healthy = FakeRedis()
        healthy.data["k"] = json.dumps({"a": 1})
        monkeypatch.setattr(redis_module.redis, "Redis", lambda **kwargs: healthy)

        store = RedisSessionStateStore(redis_client=broken)
        assert await store.get("k") == {"a": 1}
        assert broken.closed

    async def test_second_failure_is_upstream_error(self, monkeypatch) -> None:
        monkeypatch.setattr(
            redis_module.redis, "Redis", lambda **kwargs: FakeRedis(fail_with=redis.TimeoutError())
        )
        store = RedisSessionStateStore(redis_client=FakeRedis(fail_with=redis.ConnectionError()))
        with pytest.raises(UpstreamUnavailableException) as exc_info:
            await store.set("k", {"a": 1}, ttl=60)
        assert exc_info.value.details == {"operation": "session_state"}

    async def test_other_redis_errors_fail_without_retry(self) -> None:
        store = RedisSessionStateStore(redis_client=FakeRedis(fail_with=redis.ResponseError("WRONGTYPE")))
        with pytest.raises(UpstreamUnavailableException):
            await store.get("k")
