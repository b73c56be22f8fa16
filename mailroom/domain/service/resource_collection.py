"""Owned/shared partitions of one resource kind for one user."""

from collections.abc import Callable, Iterable
from typing import Optional, Union

import logfire

from mailroom.config import DirectorySettings, PreferenceSettings
from mailroom.domain.error import StaleReferenceError
from mailroom.domain.model.record import ResourceRecord
from mailroom.domain.model.resource import DirectoryOwner, Resource
from mailroom.domain.model.snapshot import CollectionSnapshot
from mailroom.domain.repository import DirectoryRepository
from mailroom.domain.value import (
    DirectoryQuery,
    PreferenceScope,
    ResourceId,
    ResourceKind,
    Slot,
    UserId,
    normalize_attributes,
)

from .base import Service
from .default_resolver import DefaultResourceResolver
from .preference_store import PreferenceStore
from .resource_factory import ResourceFactory

Partition = dict[ResourceId, Resource]
Attributes = Union[str, list[str], tuple[str, ...], None]

_PLACEHOLDERS = ("fullname", "name", "email", "uid")


class ResourceCollection(Service):
    """Lazily fetched owned, shared and default resources of a kind.

    ``shared`` is every resource the user can access and ``owned`` the
    subset the user created. When ``shared`` is populated, ``owned`` is
    derived from it instead of being fetched, so both partitions hand
    out the same wrapper for the same id.
    """

    def __init__(
        self,
        kind: ResourceKind,
        owner: DirectoryOwner,
        directory: DirectoryRepository,
        factory: ResourceFactory,
        preferences: PreferenceStore,
        settings: PreferenceSettings,
        directory_settings: DirectorySettings,
        on_change: Callable[[], None],
        resolver: Optional[DefaultResourceResolver] = None,
    ) -> None:
        """Initialize resource collection.

        Args:
            kind: Resource kind held by the collection
            owner: User the collection belongs to
            directory: Directory repository
            factory: Builds wrappers for fetched records
            preferences: Preference store of the owner
            settings: Preference names and defaults
            directory_settings: Per-server filter overrides for the listings
            on_change: Called whenever a memo slot changes
            resolver: Default resolution strategy
        """
        self.kind = kind
        self.owner = owner
        self.directory = directory
        self.factory = factory
        self.preferences = preferences
        self.settings = settings
        self.directory_settings = directory_settings
        self.resolver = resolver or DefaultResourceResolver()
        self._on_change = on_change
        self._owned: Slot[Partition] = Slot()
        self._shared: Slot[Partition] = Slot()
        self._default: Slot[Optional[Resource]] = Slot()

    @property
    def scope(self) -> PreferenceScope:
        return PreferenceScope.for_kind(self.kind)

    @property
    def default_preference(self) -> str:
        return self.settings.default_name(self.kind)

    def owner_id(self) -> Optional[UserId]:
        uid = self.owner.uid
        return UserId(uid) if uid else None

    async def get_owned(self, attributes: Attributes = None) -> Partition:
        """Resources of the kind created by the owner.

        Args:
            attributes: Attributes to fetch, the listing defaults if None
        """
        if self._owned.is_set:
            try:
                return self._validate(self._owned.get())
            except StaleReferenceError as e:
                logfire.debug("Owned partition stale", kind=self.kind.value, error=str(e))
                self._owned.clear()

        if self._shared.is_set:
            try:
                owned = self._derive_owned(self._shared.get())
            except StaleReferenceError as e:
                logfire.debug("Shared partition stale", kind=self.kind.value, error=str(e))
                self._owned.clear()
                self._shared.clear()
                self._on_change()
            else:
                self._owned.set(owned)
                self._on_change()
                return owned

        owner_id = self.owner_id()
        if owner_id is None:
            return {}

        with logfire.span("collection.fetch_owned", kind=self.kind.value, uid=owner_id):
            query = DirectoryQuery.owned_listing(self.kind)
            attrs, override = self._listing_args(query, attributes)
            records = await self.directory.fetch_owned(self.kind, owner_id, attrs, override)
            if records is None:
                logfire.warn("Owned listing unavailable", kind=self.kind.value, uid=owner_id)
                return {}
            owned = self._wrap_all(records)
            logfire.debug("Owned listing fetched", kind=self.kind.value, count=len(owned))

        self._owned.set(owned)
        self._on_change()
        return owned

    async def get_shared(self, attributes: Attributes = None) -> Partition:
        """Every resource of the kind the owner can access, owned ones included.

        Args:
            attributes: Attributes to fetch, the listing defaults if None
        """
        if self._shared.is_set:
            try:
                return self._validate(self._shared.get())
            except StaleReferenceError as e:
                logfire.debug("Shared partition stale", kind=self.kind.value, error=str(e))
                self._shared.clear()

        owner_id = self.owner_id()
        if owner_id is None:
            return {}

        with logfire.span("collection.fetch_shared", kind=self.kind.value, uid=owner_id):
            query = DirectoryQuery.shared_listing(self.kind)
            attrs, override = self._listing_args(query, attributes)
            records = await self.directory.fetch_shared(self.kind, owner_id, attrs, override)
            if records is None:
                logfire.warn("Shared listing unavailable", kind=self.kind.value, uid=owner_id)
                return {}
            shared = self._wrap_all(records, reuse=self._known_wrappers())
            logfire.debug("Shared listing fetched", kind=self.kind.value, count=len(shared))

        self._shared.set(shared)
        self._on_change()
        return shared

    def peek_owned(self) -> Optional[Partition]:
        """Owned partition if populated, without fetching."""
        return self._owned.peek()

    def peek_shared(self) -> Optional[Partition]:
        """Shared partition if populated, without fetching."""
        return self._shared.peek()

    async def get_default(self) -> Optional[Resource]:
        """The owner's default resource, None when there is none."""
        if self._default.is_set:
            current = self._default.get()
            if current is None or current.is_live:
                if current is not None:
                    current.attach(self.owner)
                return current
            logfire.debug("Default resource stale", kind=self.kind.value, id=current.id)
            self._default.clear()

        resolved = await self.resolver.resolve(self)
        self._default.set(resolved)
        self._on_change()
        return resolved

    async def set_default(self, resource: Union[Resource, str]) -> bool:
        """Record a resource as the owner's default.

        Passing a wrapper makes it the memoized default; passing an id
        leaves the default to be resolved on the next read. Owned and
        shared partitions are left alone.
        """
        resource_id = resource.id if isinstance(resource, Resource) else resource
        if not resource_id:
            logfire.warn("Default resource without id", kind=self.kind.value)
            return False

        if not await self.preferences.set(self.scope, self.default_preference, resource_id):
            return False

        if isinstance(resource, Resource):
            resource.attach(self.owner)
            self._default.set(resource)
        else:
            self._default.clear()
        self._on_change()
        logfire.info("Default resource set", kind=self.kind.value, id=resource_id)
        return True

    async def create_default(self, name_template: Optional[str] = None) -> bool:
        """Create the owner's default resource and record it as default.

        The new resource takes the owner's uid as id. ``name_template``
        may use ``%%fullname%%``, ``%%name%%``, ``%%email%%`` and
        ``%%uid%%``; without a template the owner's full name is used.
        """
        owner_id = self.owner_id()
        if owner_id is None:
            logfire.warn("Default resource creation without uid", kind=self.kind.value)
            return False

        with logfire.span("collection.create_default", kind=self.kind.value, uid=owner_id):
            resource = self.factory.create(self.kind, self.owner)
            resource.id = ResourceId(owner_id)
            resource.owner = owner_id
            resource.name = self._render(name_template) or self.owner.fullname or owner_id

            if not await resource.save():
                logfire.warn("Default resource rejected", kind=self.kind.value, uid=owner_id)
                return False

            if not await self.set_default(resource.id):
                return False

            for name, value in self.settings.created_defaults.get(self.kind, {}).items():
                await self.preferences.set(self.scope, name, value)

            logfire.info("Default resource created", kind=self.kind.value, uid=owner_id)
            return True

    def invalidate(self) -> None:
        """Forget every partition and the default."""
        self._owned.clear()
        self._shared.clear()
        self._default.clear()
        self._on_change()

    def snapshot(self) -> CollectionSnapshot:
        owned = self._owned.peek()
        shared = self._shared.peek()
        default = self._default.peek()
        return CollectionSnapshot(
            owned=_records(owned.values()) if owned is not None else None,
            shared=_records(shared.values()) if shared is not None else None,
            default=default.to_record() if default is not None else None,
            default_resolved=self._default.is_set,
        )

    def wrap(self, record: ResourceRecord) -> Resource:
        return self.factory.wrap(record, self.owner)

    def _wrap_all(
        self,
        records: Iterable[ResourceRecord],
        reuse: Optional[Partition] = None,
    ) -> Partition:
        partition: Partition = {}
        for record in records:
            if record.kind != self.kind:
                logfire.warn(
                    "Unexpected record kind",
                    expected=self.kind.value,
                    actual=record.kind.value,
                    id=record.id,
                )
                continue
            existing = (reuse or {}).get(record.id)
            if existing is not None:
                existing.bind(record)
                existing.attach(self.owner)
                partition[record.id] = existing
            else:
                partition[record.id] = self.wrap(record)
        return partition

    def _listing_args(
        self, query: DirectoryQuery, attributes: Attributes
    ) -> tuple[list[str], Optional[str]]:
        return (
            normalize_attributes(attributes, query),
            self.directory_settings.filter_for(self.owner.server, query),
        )

    def _known_wrappers(self) -> Partition:
        known: Partition = {}
        default = self._default.peek()
        if default is not None and default.is_live and default.id is not None:
            known[default.id] = default
        for resource in (self._owned.peek() or {}).values():
            if resource.is_live:
                known[resource.id] = resource
        return known

    def _derive_owned(self, shared: Partition) -> Partition:
        self._validate(shared)
        owner_id = self.owner_id()
        owned: Partition = {}
        for resource_id, resource in shared.items():
            resource.attach(self.owner)
            if owner_id is not None and resource.owner == owner_id:
                owned[resource_id] = resource
        return owned

    def _validate(self, partition: Partition) -> Partition:
        expected = self.factory.classes[self.kind]
        for resource_id, resource in partition.items():
            if not isinstance(resource, expected) or not resource.is_live:
                raise StaleReferenceError(self.kind.value, resource_id)
        return partition

    def _render(self, template: Optional[str]) -> Optional[str]:
        if not template:
            return None
        rendered = template
        for field in _PLACEHOLDERS:
            value = getattr(self.owner, field, None)
            rendered = rendered.replace(f"%%{field}%%", value or "")
        return rendered


def _records(resources: Iterable[Resource]) -> list[ResourceRecord]:
    return [resource.to_record() for resource in resources]
