"""Redis cache adapter."""

from .cache import RedisCacheRepository

__all__ = ["RedisCacheRepository"]
