"""In-memory preference repository for testing."""

from collections import Counter
from typing import Optional

from mailroom.domain.model.record import PreferenceEntry
from mailroom.domain.repository.preference import PreferenceRepository
from mailroom.domain.value import PreferenceScope, UserId

PreferenceKey = tuple[UserId, PreferenceScope, str]


class InMemoryPreferenceRepository(PreferenceRepository):
    """In-memory implementation of PreferenceRepository for testing."""

    def __init__(self) -> None:
        self._entries: dict[PreferenceKey, PreferenceEntry] = {}
        self.calls: Counter[str] = Counter()
        self.accept_writes = True
        self.available = True

    def add(self, owner: str, scope: PreferenceScope, name: str, value: str) -> PreferenceEntry:
        """Seed a stored preference."""
        entry = PreferenceEntry(owner=UserId(owner), scope=scope, name=name, value=value)
        self._entries[(entry.owner, entry.scope, entry.name)] = entry
        return entry

    def stored(self, owner: str, scope: PreferenceScope, name: str) -> Optional[str]:
        entry = self._entries.get((UserId(owner), scope, name))
        return entry.value if entry is not None else None

    async def list_all(self, owner_id: UserId) -> Optional[list[PreferenceEntry]]:
        """List every preference of a user."""
        self.calls["list_all"] += 1
        if not self.available:
            return None
        return [entry for entry in self._entries.values() if entry.owner == owner_id]

    async def persist(self, entry: PreferenceEntry) -> bool:
        """Save or update a preference."""
        self.calls["persist"] += 1
        if not self.accept_writes:
            return False
        self._entries[(entry.owner, entry.scope, entry.name)] = entry
        return True

    async def delete(self, entry: PreferenceEntry) -> bool:
        """Delete a preference, present or not."""
        self.calls["delete"] += 1
        if not self.accept_writes:
            return False
        self._entries.pop((entry.owner, entry.scope, entry.name), None)
        return True
