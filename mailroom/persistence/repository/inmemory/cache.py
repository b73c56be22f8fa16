"""In-memory cache repository for testing."""

from typing import Optional

from mailroom.adapter.error import CacheError
from mailroom.domain.repository.cache import CacheRepository


class InMemoryCacheRepository(CacheRepository):
    """In-memory implementation of CacheRepository for testing."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.ttls: dict[str, Optional[int]] = {}
        self.writes = 0
        self.fail = False

    async def put(self, key: str, blob: bytes, ttl: Optional[int] = None) -> bool:
        """Store a blob, or raise CacheError when ``fail`` is set."""
        self.writes += 1
        if self.fail:
            raise CacheError(f"Cache unavailable for {key}")
        self.blobs[key] = blob
        self.ttls[key] = ttl
        return True
