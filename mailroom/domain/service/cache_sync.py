"""Write-through mirror of aggregate memo state to an external cache."""

from typing import Optional, Protocol

import logfire
from pydantic import BaseModel

from mailroom.adapter.error import CacheError
from mailroom.config import CacheSettings
from mailroom.domain.repository import CacheRepository

from .base import Service


class Cacheable(Protocol):
    """An aggregate whose memo state can be mirrored."""

    cache_kind: str

    @property
    def cache_id(self) -> Optional[str]: ...

    @property
    def server(self) -> str: ...

    def snapshot(self) -> BaseModel: ...


class CacheSync(Service):
    """Best-effort mirror of aggregate snapshots.

    The in-process memo stays authoritative; a failed write only costs
    the next process a cold start.
    """

    def __init__(self, cache: Optional[CacheRepository], settings: CacheSettings) -> None:
        """Initialize cache sync.

        Args:
            cache: External cache, None when no cache is configured
            settings: Cache configuration
        """
        self.cache = cache
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.enabled and self.cache is not None

    def key_for(self, aggregate: Cacheable) -> Optional[str]:
        """Cache key of an aggregate, None while it has no identity."""
        if not aggregate.cache_id:
            return None
        return (
            f"{self.settings.key_prefix}{aggregate.cache_kind}:"
            f"{aggregate.cache_id}:{aggregate.server}"
        )

    async def sync(self, aggregate: Cacheable) -> bool:
        """Store the aggregate's snapshot.

        Returns:
            True if the cache accepted the write. Never raises for cache
            or serialization failures.
        """
        if not self.enabled:
            return False

        key = self.key_for(aggregate)
        if key is None:
            logfire.debug("Cache sync skipped, no identity", kind=aggregate.cache_kind)
            return False

        cache = self.cache
        if cache is None:
            return False

        with logfire.span("cache_sync.sync", key=key):
            try:
                blob = aggregate.snapshot().model_dump_json().encode("utf-8")
                stored = await cache.put(key, blob, self.settings.ttl_seconds)
            except (CacheError, ValueError) as e:
                logfire.warn("Cache sync failed", key=key, error=str(e))
                return False

            if not stored:
                logfire.warn("Cache sync rejected", key=key)
            return stored
