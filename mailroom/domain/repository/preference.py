"""Preference repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from mailroom.domain.model.record import PreferenceEntry
from mailroom.domain.value import UserId


class PreferenceRepository(ABC):
    """Repository for user preferences."""

    @abstractmethod
    async def list_all(self, owner_id: UserId) -> Optional[list[PreferenceEntry]]:
        """List every preference of a user in one call.

        Args:
            owner_id: The user's uid

        Returns:
            The entries, or None if the backend could not answer
        """
        pass

    @abstractmethod
    async def persist(self, entry: PreferenceEntry) -> bool:
        """Create or update a preference.

        Returns:
            True once the backend confirmed the write
        """
        pass

    @abstractmethod
    async def delete(self, entry: PreferenceEntry) -> bool:
        """Delete a preference.

        Returns:
            True once the backend confirmed the delete
        """
        pass
