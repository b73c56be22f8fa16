"""Domain models for the directory layer.

The ``User`` aggregate lives in :mod:`mailroom.domain.model.user` and is
imported from there; it depends on the domain services.
"""

from mailroom.domain.model.record import DirectoryEntry, PreferenceEntry, ResourceRecord
from mailroom.domain.model.resource import (
    Addressbook,
    Calendar,
    Group,
    Resource,
    ResourceOwner,
    SharedMailbox,
    Taskslist,
)
from mailroom.domain.model.share import MailboxShare, ObjectShare
from mailroom.domain.model.snapshot import CollectionSnapshot, UserSnapshot

__all__ = [
    "DirectoryEntry",
    "PreferenceEntry",
    "ResourceRecord",
    "Resource",
    "ResourceOwner",
    "Calendar",
    "Taskslist",
    "Addressbook",
    "Group",
    "SharedMailbox",
    "MailboxShare",
    "ObjectShare",
    "CollectionSnapshot",
    "UserSnapshot",
]
