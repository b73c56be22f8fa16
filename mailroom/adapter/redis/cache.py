"""Redis-backed external cache."""

from typing import Optional

import logfire
import redis.asyncio as redis
from redis.exceptions import RedisError

from mailroom.domain.repository.cache import CacheRepository


class RedisCacheRepository(CacheRepository):
    """CacheRepository storing blobs in Redis with an expiry."""

    def __init__(self, redis_client: redis.Redis, default_ttl: int = 3600) -> None:
        """Initialize Redis cache repository.

        Args:
            redis_client: Async Redis client
            default_ttl: Expiry in seconds when a write doesn't name one
        """
        self._redis = redis_client
        self._default_ttl = default_ttl

    async def put(self, key: str, blob: bytes, ttl: Optional[int] = None) -> bool:
        """Store a blob under a key."""
        try:
            result = await self._redis.setex(key, ttl or self._default_ttl, blob)
            return bool(result)
        except RedisError as e:
            logfire.error("Error storing cache entry", key=key, error=str(e))
            return False

    async def close(self) -> None:
        await self._redis.aclose()
