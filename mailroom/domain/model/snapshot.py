"""Serializable view of a user's memoized state.

Only the fields listed here reach the external cache. Unset memo slots
are ``None``; populated-but-empty ones are empty lists.
"""

from typing import Optional

from mailroom.domain.model.common import DomainModel
from mailroom.domain.model.record import DirectoryEntry, PreferenceEntry, ResourceRecord
from mailroom.domain.value import DirectoryQuery, ResourceKind, ShareTier


class CollectionSnapshot(DomainModel):
    """Memo state of one resource kind."""

    owned: Optional[list[ResourceRecord]] = None
    shared: Optional[list[ResourceRecord]] = None
    default: Optional[ResourceRecord] = None
    default_resolved: bool = False


class UserSnapshot(DomainModel):
    """Memo state of a user aggregate."""

    uid: Optional[str] = None
    email: Optional[str] = None
    server: str
    entry: Optional[DirectoryEntry] = None
    is_loaded: Optional[bool] = None
    is_exist: Optional[bool] = None
    collections: dict[ResourceKind, CollectionSnapshot] = {}
    share_tiers: dict[ShareTier, Optional[list[ResourceRecord]]] = {}
    groups: dict[DirectoryQuery, Optional[list[ResourceRecord]]] = {}
    preferences: Optional[list[PreferenceEntry]] = None
