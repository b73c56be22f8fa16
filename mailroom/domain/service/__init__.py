"""Domain services for the directory layer."""

from mailroom.domain.service.base import Service
from mailroom.domain.service.cache_sync import CacheSync
from mailroom.domain.service.context import DirectoryContext
from mailroom.domain.service.default_resolver import DefaultResourceResolver
from mailroom.domain.service.preference_store import PreferenceStore
from mailroom.domain.service.resource_collection import ResourceCollection
from mailroom.domain.service.resource_factory import ResourceFactory
from mailroom.domain.service.share_index import GroupIndex, RecordIndex, ShareIndex
from mailroom.domain.service.user_service import UserService

__all__ = [
    "Service",
    "CacheSync",
    "DirectoryContext",
    "DefaultResourceResolver",
    "PreferenceStore",
    "ResourceCollection",
    "ResourceFactory",
    "RecordIndex",
    "ShareIndex",
    "GroupIndex",
    "UserService",
]
