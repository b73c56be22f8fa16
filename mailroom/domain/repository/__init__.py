"""Repository interfaces for the directory domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence and adapter layers.
"""

from mailroom.domain.repository.cache import CacheRepository
from mailroom.domain.repository.directory import DirectoryRepository
from mailroom.domain.repository.preference import PreferenceRepository

__all__ = [
    "CacheRepository",
    "DirectoryRepository",
    "PreferenceRepository",
]
