"""External cache interface."""

from abc import ABC, abstractmethod
from typing import Optional


class CacheRepository(ABC):
    """Process-external key/value cache.

    Writes are best effort. Implementations may raise ``CacheError`` or
    return False; callers must not depend on the write landing.
    """

    @abstractmethod
    async def put(self, key: str, blob: bytes, ttl: Optional[int] = None) -> bool:
        """Store a blob under a key.

        Args:
            key: Cache key
            blob: Serialized value
            ttl: Expiry in seconds, None for the implementation default

        Returns:
            True if the value was stored
        """
        pass
