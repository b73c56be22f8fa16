"""External cache infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
import redis.asyncio as redis
from dishka import Scope, provide

from mailroom.adapter.redis import RedisCacheRepository
from mailroom.config import CacheSettings
from mailroom.domain.repository import CacheRepository
from mailroom.util.di.base import ProviderBase
from mailroom.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider using Redis."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_redis_client(
        self, cache_settings: CacheSettings
    ) -> AsyncIterator[redis.Redis]:
        """Provide Redis client, closed with the container.

        The client connects lazily, so a disabled cache never opens a
        connection.
        """
        client = redis.from_url(cache_settings.url)
        if cache_settings.enabled:
            instrument_redis()
        try:
            yield client
        finally:
            await client.aclose()
            logfire.info("Redis client closed")

    @provide(scope=Scope.APP)
    def get_cache_repository(
        self, client: redis.Redis, cache_settings: CacheSettings
    ) -> CacheRepository:
        """Provide Redis cache repository."""
        return RedisCacheRepository(client, default_ttl=cache_settings.ttl_seconds)
