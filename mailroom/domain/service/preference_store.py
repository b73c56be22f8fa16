"""Scoped key/value preferences of one user."""

from collections.abc import Callable
from typing import Optional

import logfire

from mailroom.domain.model.record import PreferenceEntry
from mailroom.domain.model.resource import ResourceOwner
from mailroom.domain.repository import PreferenceRepository
from mailroom.domain.value import PreferenceScope, Slot, UserId

from .base import Service

PreferenceKey = tuple[PreferenceScope, str]


class PreferenceStore(Service):
    """Read-through, write-through preference map.

    The first read loads every preference of the user in one backend call;
    later reads, including misses, are answered from memory. A listing the
    backend could not answer is not memoized. Writes go to
    the backend before the map is updated.
    """

    def __init__(
        self,
        owner: ResourceOwner,
        repository: PreferenceRepository,
        on_change: Callable[[], None],
    ) -> None:
        """Initialize preference store.

        Args:
            owner: User the preferences belong to
            repository: Preference backend
            on_change: Called whenever the memoized map changes
        """
        self.owner = owner
        self.repository = repository
        self._on_change = on_change
        self._entries: Slot[dict[PreferenceKey, PreferenceEntry]] = Slot()

    @property
    def is_loaded(self) -> bool:
        return self._entries.is_set

    async def get(self, scope: PreferenceScope, name: str) -> Optional[str]:
        """Value of a preference, None if it doesn't exist."""
        entries = await self._load()
        entry = entries.get((PreferenceScope(scope), name))
        return entry.value if entry is not None else None

    async def set(self, scope: PreferenceScope, name: str, value: str) -> bool:
        """Create or update a preference.

        Returns:
            True once the backend confirmed the write
        """
        scope = PreferenceScope(scope)
        entries = await self._load()
        owner_id = self._owner_id()
        if owner_id is None:
            logfire.warn("Preference write without uid", scope=scope.value, name=name)
            return False

        current = entries.get((scope, name))
        if current is None:
            entry = PreferenceEntry(owner=owner_id, scope=scope, name=name, value=value)
        else:
            entry = current.model_copy(update={"value": value})

        if not await self.repository.persist(entry):
            logfire.warn(
                "Preference write rejected",
                uid=owner_id,
                scope=scope.value,
                name=name,
            )
            return False

        entries[entry.key] = entry
        self._on_change()
        return True

    async def delete(self, scope: PreferenceScope, name: str) -> bool:
        """Delete a preference.

        A missing preference is deleted through a transient entry so the
        backend sees the same call either way. The key leaves the map
        whatever the backend answers.
        """
        scope = PreferenceScope(scope)
        entries = await self._load()
        owner_id = self._owner_id()
        if owner_id is None:
            logfire.warn("Preference delete without uid", scope=scope.value, name=name)
            return False

        entry = entries.get((scope, name)) or PreferenceEntry(
            owner=owner_id, scope=scope, name=name
        )
        deleted = await self.repository.delete(entry)
        entries.pop(entry.key, None)
        self._on_change()
        return deleted

    def entries(self) -> Optional[list[PreferenceEntry]]:
        """Loaded entries, None if nothing was loaded yet."""
        if not self._entries.is_set:
            return None
        return list(self._entries.get().values())

    def invalidate(self) -> None:
        self._entries.clear()
        self._on_change()

    async def _load(self) -> dict[PreferenceKey, PreferenceEntry]:
        if self._entries.is_set:
            return self._entries.get()

        owner_id = self._owner_id()
        entries: dict[PreferenceKey, PreferenceEntry] = {}
        if owner_id is not None:
            with logfire.span("preferences.load", uid=owner_id):
                loaded = await self.repository.list_all(owner_id)
                if loaded is None:
                    logfire.warn("Preferences unavailable", uid=owner_id)
                    return entries
                for entry in loaded:
                    entries[entry.key] = entry
                logfire.debug("Preferences loaded", uid=owner_id, count=len(entries))
            self._entries.set(entries)
            self._on_change()
        return entries

    def _owner_id(self) -> Optional[UserId]:
        uid = self.owner.uid
        return UserId(uid) if uid else None
