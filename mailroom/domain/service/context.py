"""Collaborators shared by every user aggregate of a request."""

from dataclasses import dataclass

from mailroom.config import Settings
from mailroom.domain.repository import DirectoryRepository, PreferenceRepository

from .cache_sync import CacheSync
from .resource_factory import ResourceFactory


@dataclass(frozen=True)
class DirectoryContext:
    """Everything a ``User`` needs besides its own identity."""

    directory: DirectoryRepository
    preferences: PreferenceRepository
    cache_sync: CacheSync
    factory: ResourceFactory
    settings: Settings
