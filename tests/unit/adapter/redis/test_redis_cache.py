"""Unit tests for the Redis cache repository."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from mailroom.adapter.redis import RedisCacheRepository


class FakeRedis:
    """Records setex calls in place of a Redis client."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[str, int, bytes]] = []
        self.closed = False

    async def setex(self, key, ttl, value):
        if self.error is not None:
            raise self.error
        self.calls.append((key, ttl, value))
        return True

    async def aclose(self):
        self.closed = True


class TestRedisCacheRepository:
    """Tests for RedisCacheRepository."""

    @pytest.mark.asyncio
    async def test_put_with_ttl(self):
        client = FakeRedis()
        repo = RedisCacheRepository(client, default_ttl=3600)

        assert await repo.put("mr:user:alice:default", b"{}", ttl=60) is True
        assert client.calls == [("mr:user:alice:default", 60, b"{}")]

    @pytest.mark.asyncio
    async def test_put_uses_default_ttl(self):
        client = FakeRedis()
        repo = RedisCacheRepository(client, default_ttl=120)

        await repo.put("key", b"{}")

        assert client.calls[0][1] == 120

    @pytest.mark.asyncio
    async def test_redis_error_is_reported_as_failed_write(self):
        repo = RedisCacheRepository(FakeRedis(error=RedisConnectionError("down")))

        assert await repo.put("key", b"{}") is False

    @pytest.mark.asyncio
    async def test_close(self):
        client = FakeRedis()

        await RedisCacheRepository(client).close()

        assert client.closed
