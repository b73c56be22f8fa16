"""Directory repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from mailroom.domain.model.record import DirectoryEntry, ResourceRecord
from mailroom.domain.value import DirectoryQuery, ResourceKind, ShareTier, UserId


class DirectoryRepository(ABC):
    """Repository over the directory/SQL backend.

    Implementations run the actual queries. Every listing accepts the
    attributes to fetch and an optional server-specific filter that
    replaces the backend's default one. Listings return ``None`` when the
    backend could not answer, which callers treat as "nothing found".
    """

    @abstractmethod
    async def load_user(
        self,
        uid: Optional[str],
        email: Optional[str],
        attributes: list[str],
        filter: Optional[str] = None,
        filter_from_email: Optional[str] = None,
    ) -> Optional[DirectoryEntry]:
        """Find a user entry by uid, or by email when no uid is given.

        Args:
            uid: User uid
            email: Primary email address
            attributes: Attributes to load
            filter: Filter override for the uid lookup
            filter_from_email: Filter override for the email lookup

        Returns:
            The entry if found, None otherwise
        """
        pass

    @abstractmethod
    async def fetch_default(
        self, kind: ResourceKind, owner_id: UserId
    ) -> Optional[ResourceRecord]:
        """Find the default resource of a kind for a user.

        This is a dedicated lookup, distinct from listing.
        """
        pass

    @abstractmethod
    async def fetch_owned(
        self,
        kind: ResourceKind,
        owner_id: UserId,
        attributes: Optional[list[str]] = None,
        filter: Optional[str] = None,
    ) -> Optional[list[ResourceRecord]]:
        """List the resources of a kind created by a user."""
        pass

    @abstractmethod
    async def fetch_shared(
        self,
        kind: ResourceKind,
        owner_id: UserId,
        attributes: Optional[list[str]] = None,
        filter: Optional[str] = None,
    ) -> Optional[list[ResourceRecord]]:
        """List every resource of a kind a user can access, owned ones included."""
        pass

    @abstractmethod
    async def fetch_share_tier(
        self,
        tier: ShareTier,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str] = None,
    ) -> list[ResourceRecord]:
        """List the mailboxes shared with a user at an access tier.

        Each record's ``raw`` holds the mailbox's directory attributes.
        """
        pass

    @abstractmethod
    async def fetch_groups(
        self,
        query: DirectoryQuery,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str] = None,
    ) -> list[ResourceRecord]:
        """List groups or mailing lists related to a user."""
        pass

    @abstractmethod
    async def persist(self, record: ResourceRecord) -> bool:
        """Create or update a resource. Returns False if the backend rejected it."""
        pass

    @abstractmethod
    async def delete(self, record: ResourceRecord) -> bool:
        """Delete a resource. Returns False if the backend rejected it."""
        pass
