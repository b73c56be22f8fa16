"""Lazily fetched record sets keyed by access tier or membership query."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, Optional, TypeVar

import logfire

from mailroom.config import DirectorySettings
from mailroom.domain.model.record import ResourceRecord
from mailroom.domain.model.resource import DirectoryOwner, Resource, SharedMailbox
from mailroom.domain.repository import DirectoryRepository
from mailroom.domain.value import (
    DirectoryQuery,
    ResourceId,
    ResourceKind,
    ShareTier,
    Slot,
    UserId,
    normalize_attributes,
)

from .base import Service
from .resource_factory import ResourceFactory

K = TypeVar("K", ShareTier, DirectoryQuery)
U = TypeVar("U")

Attributes = str | list[str] | tuple[str, ...] | None

GROUP_QUERIES: tuple[DirectoryQuery, ...] = (
    DirectoryQuery.USER_GROUPS,
    DirectoryQuery.GROUPS_MEMBER,
    DirectoryQuery.LISTS_MEMBER,
)


class RecordIndex(Service, ABC, Generic[K]):
    """Independent lazy sets, one per key.

    Fetching one key never populates another. Each set maps record id to
    a wrapper bound to the owner.
    """

    kind: ResourceKind
    keys: tuple[K, ...]

    def __init__(
        self,
        owner: DirectoryOwner,
        directory: DirectoryRepository,
        factory: ResourceFactory,
        settings: DirectorySettings,
        on_change: Callable[[], None],
    ) -> None:
        """Initialize record index.

        Args:
            owner: User the sets belong to
            directory: Directory repository
            factory: Builds wrappers for fetched records
            settings: Per-server filter overrides
            on_change: Called whenever a set changes
        """
        self.owner = owner
        self.directory = directory
        self.factory = factory
        self.settings = settings
        self._on_change = on_change
        self._sets: dict[K, Slot[dict[ResourceId, Resource]]] = {key: Slot() for key in self.keys}

    @abstractmethod
    def query_for(self, key: K) -> DirectoryQuery:
        """Directory query whose filter override applies to a key."""
        pass

    @abstractmethod
    async def fetch(
        self,
        key: K,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str],
    ) -> list[ResourceRecord]:
        """Fetch the records of one key from the directory."""
        pass

    async def get(self, key: K, attributes: Attributes = None) -> dict[ResourceId, Resource]:
        """The set for a key, fetched on first use.

        Args:
            key: Tier or query naming the set
            attributes: Attributes to fetch, the query's defaults if None
        """
        slot = self._sets[key]
        if slot.is_set:
            current = slot.get()
            if self._is_valid(current):
                return current
            logfire.debug("Record set stale", key=key.value)
            self._clear(key)

        owner_id = self.owner.uid
        if not owner_id:
            return {}

        query = self.query_for(key)
        with logfire.span("record_index.fetch", key=key.value, uid=owner_id):
            records = await self.fetch(
                key,
                UserId(owner_id),
                normalize_attributes(attributes, query),
                self.settings.filter_for(self.owner.server, query),
            )
            indexed: dict[ResourceId, Resource] = {}
            for record in records or []:
                indexed[record.id] = self.factory.wrap(record, self.owner)
            logfire.debug("Record set fetched", key=key.value, count=len(indexed))

        slot.set(indexed)
        self._populated(key)
        self._on_change()
        return indexed

    def peek(self, key: K) -> Optional[dict[ResourceId, Resource]]:
        return self._sets[key].peek()

    def invalidate(self, key: K) -> None:
        self._clear(key)
        self._on_change()

    def invalidate_all(self) -> None:
        for key in self.keys:
            self._clear(key)
        self._on_change()

    def snapshot(self) -> dict[K, Optional[list[ResourceRecord]]]:
        result: dict[K, Optional[list[ResourceRecord]]] = {}
        for key, slot in self._sets.items():
            current = slot.peek()
            result[key] = (
                [resource.to_record() for resource in current.values()]
                if current is not None
                else None
            )
        return result

    def _is_valid(self, current: dict[ResourceId, Resource]) -> bool:
        expected = self.factory.classes[self.kind]
        return all(
            isinstance(resource, expected) and resource.is_live for resource in current.values()
        )

    def _clear(self, key: K) -> None:
        self._sets[key].clear()

    def _populated(self, key: K) -> None:
        """Hook run after the set of a key was fetched."""


class ShareIndex(RecordIndex[ShareTier]):
    """Mailboxes shared with a user, per access tier.

    Each tier also has a user-shaped view built from the same records,
    so both views of a tier cost a single fetch.
    """

    kind = ResourceKind.MAILBOX
    keys = (ShareTier.SHARED, ShareTier.SEND, ShareTier.MANAGE)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._users: dict[ShareTier, Slot[dict[ResourceId, Any]]] = {
            tier: Slot() for tier in self.keys
        }

    def query_for(self, key: ShareTier) -> DirectoryQuery:
        return key.query

    async def fetch(
        self,
        key: ShareTier,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str],
    ) -> list[ResourceRecord]:
        return await self.directory.fetch_share_tier(key, owner_id, attributes, filter)

    async def get_users(
        self,
        tier: ShareTier,
        to_user: Callable[[SharedMailbox], U],
        attributes: Attributes = None,
    ) -> dict[ResourceId, U]:
        """User-shaped view of a tier.

        Args:
            tier: Access tier
            to_user: Builds a user wrapper from a shared mailbox
            attributes: Attributes to fetch if the tier is not loaded yet
        """
        mailboxes = await self.get(tier, attributes)
        users = self._users[tier]
        if not users.is_set:
            users.set(
                {
                    resource_id: to_user(mailbox)
                    for resource_id, mailbox in mailboxes.items()
                    if isinstance(mailbox, SharedMailbox)
                }
            )
        return users.get()

    def _clear(self, key: ShareTier) -> None:
        super()._clear(key)
        self._users[key].clear()

    def _populated(self, key: ShareTier) -> None:
        self._users[key].clear()


class GroupIndex(RecordIndex[DirectoryQuery]):
    """Groups and mailing lists related to a user, one set per query."""

    kind = ResourceKind.GROUP
    keys = GROUP_QUERIES

    def query_for(self, key: DirectoryQuery) -> DirectoryQuery:
        return key

    async def fetch(
        self,
        key: DirectoryQuery,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str],
    ) -> list[ResourceRecord]:
        return await self.directory.fetch_groups(key, owner_id, attributes, filter)
