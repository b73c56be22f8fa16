"""Lightweight stand-ins for the user aggregate in service tests."""

from typing import Optional

from mailroom.config import DirectorySettings, PreferenceSettings
from mailroom.domain.service import PreferenceStore, ResourceCollection, ResourceFactory
from mailroom.domain.value import ResourceKind


class StubOwner:
    """Resource owner recording change notifications.

    Unlike ``User`` it never invalidates anything, which lets tests leave
    dead wrappers inside memoized partitions.
    """

    def __init__(
        self,
        uid: Optional[str] = "alice",
        fullname: Optional[str] = "Alice Liddell",
        name: Optional[str] = "Liddell",
        email: Optional[str] = "alice@example.com",
        server: str = "default",
    ) -> None:
        self.uid = uid
        self.fullname = fullname
        self.name = name
        self.email = email
        self.server = server
        self.changed: list[ResourceKind] = []

    async def resource_changed(self, kind: ResourceKind) -> None:
        self.changed.append(kind)


class ChangeCounter:
    """Callable counting memo change signals."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


def build_collection(
    directory,
    preference_repository,
    owner: Optional[StubOwner] = None,
    kind: ResourceKind = ResourceKind.CALENDAR,
    settings: Optional[PreferenceSettings] = None,
    directory_settings: Optional[DirectorySettings] = None,
) -> ResourceCollection:
    """Collection of a stub owner over in-memory backends."""
    owner = owner or StubOwner()
    preferences = PreferenceStore(owner, preference_repository, ChangeCounter())
    return ResourceCollection(
        kind,
        owner,
        directory,
        ResourceFactory(directory),
        preferences,
        settings or PreferenceSettings(),
        directory_settings or DirectorySettings(),
        ChangeCounter(),
    )
