"""In-memory repository implementations for testing."""

from .cache import InMemoryCacheRepository
from .directory import InMemoryDirectoryRepository
from .preference import InMemoryPreferenceRepository

__all__ = [
    "InMemoryCacheRepository",
    "InMemoryDirectoryRepository",
    "InMemoryPreferenceRepository",
]
