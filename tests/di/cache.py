"""Mock cache providers for testing."""

from dishka import Scope, provide

from mailroom.domain.repository import CacheRepository
from mailroom.persistence.repository.inmemory import InMemoryCacheRepository
from mailroom.util.di.infrastructure.cache import CacheProvider


class MockCacheProvider(CacheProvider):
    """Mock cache provider storing blobs in memory."""

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_cache_repository(self) -> CacheRepository:
        """Provide in-memory cache repository."""
        return InMemoryCacheRepository()
