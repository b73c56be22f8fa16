"""In-memory directory repository for testing."""

from collections import Counter
from typing import Any, Optional

from mailroom.domain.model.record import DirectoryEntry, ResourceRecord
from mailroom.domain.repository.directory import DirectoryRepository
from mailroom.domain.value import DirectoryQuery, ResourceId, ResourceKind, ShareTier, UserId

RecordKey = tuple[ResourceKind, ResourceId]


class InMemoryDirectoryRepository(DirectoryRepository):
    """In-memory implementation of DirectoryRepository for testing.

    Every call is counted in ``calls``. Filters received are kept in
    ``filters`` and listing attributes in ``attributes``, so tests can
    assert how often and how the backend was queried.
    """

    def __init__(self) -> None:
        self._users: dict[str, DirectoryEntry] = {}
        self._records: dict[RecordKey, ResourceRecord] = {}
        self._grants: dict[RecordKey, set[UserId]] = {}
        self._defaults: dict[tuple[ResourceKind, UserId], ResourceId] = {}
        self._share_tiers: dict[tuple[ShareTier, UserId], list[ResourceRecord]] = {}
        self._groups: dict[tuple[DirectoryQuery, UserId], list[ResourceRecord]] = {}
        self.calls: Counter[str] = Counter()
        self.filters: list[tuple[str, Optional[str]]] = []
        self.attributes: list[tuple[str, Optional[list[str]]]] = []
        self.accept_writes = True
        self.available = True

    # Fixtures

    def add_user(self, uid: str, dn: Optional[str] = None, **attributes: Any) -> DirectoryEntry:
        """Register a directory entry."""
        entry = DirectoryEntry(
            dn=dn or f"uid={uid},ou=people",
            attributes={"uid": uid, **attributes},
        )
        self._users[uid] = entry
        return entry

    def add_resource(
        self,
        kind: ResourceKind,
        resource_id: str,
        owner: str,
        name: Optional[str] = None,
        shared_with: tuple[str, ...] = (),
        **raw: Any,
    ) -> ResourceRecord:
        """Register a resource and the users it is shared with."""
        record = ResourceRecord(
            kind=kind,
            id=ResourceId(resource_id),
            owner=UserId(owner),
            name=name or resource_id,
            raw=raw,
        )
        self._records[(kind, record.id)] = record
        self._grants[(kind, record.id)] = {UserId(uid) for uid in shared_with}
        return record

    def set_default(self, kind: ResourceKind, owner: str, resource_id: str) -> None:
        """Answer dedicated default lookups for a user."""
        self._defaults[(kind, UserId(owner))] = ResourceId(resource_id)

    def add_share(
        self, tier: ShareTier, owner: str, mailbox_uid: str, **attributes: Any
    ) -> ResourceRecord:
        """Share a mailbox with a user at an access tier."""
        raw = {"uid": mailbox_uid, "dn": f"uid={mailbox_uid},ou=mailboxes", **attributes}
        record = ResourceRecord(
            kind=ResourceKind.MAILBOX,
            id=ResourceId(mailbox_uid),
            owner=UserId(mailbox_uid),
            name=attributes.get("fullname", mailbox_uid),
            raw=raw,
        )
        self._share_tiers.setdefault((tier, UserId(owner)), []).append(record)
        return record

    def add_group(
        self, query: DirectoryQuery, owner: str, group_id: str, **raw: Any
    ) -> ResourceRecord:
        """Relate a group to a user through a membership query."""
        record = ResourceRecord(
            kind=ResourceKind.GROUP,
            id=ResourceId(group_id),
            owner=UserId(owner),
            name=raw.get("fullname", group_id),
            raw=raw,
        )
        self._groups.setdefault((query, UserId(owner)), []).append(record)
        return record

    def stored(self, kind: ResourceKind, resource_id: str) -> Optional[ResourceRecord]:
        return self._records.get((kind, ResourceId(resource_id)))

    # DirectoryRepository

    async def load_user(
        self,
        uid: Optional[str],
        email: Optional[str],
        attributes: list[str],
        filter: Optional[str] = None,
        filter_from_email: Optional[str] = None,
    ) -> Optional[DirectoryEntry]:
        """Find a user by uid, or by any of its addresses."""
        self.calls["load_user"] += 1
        entry: Optional[DirectoryEntry] = None
        if uid:
            self.filters.append(("load_user", filter))
            entry = self._users.get(uid)
        elif email:
            self.filters.append(("load_user_from_email", filter_from_email))
            for candidate in self._users.values():
                if email in candidate.all("email") + candidate.all("email_list"):
                    entry = candidate
                    break
        if entry is None:
            return None
        selected = {
            name: value
            for name, value in entry.attributes.items()
            if name in attributes or name == "uid"
        }
        return DirectoryEntry(dn=entry.dn, attributes=selected)

    async def fetch_default(
        self, kind: ResourceKind, owner_id: UserId
    ) -> Optional[ResourceRecord]:
        """Find the recorded default resource of a user."""
        self.calls["fetch_default"] += 1
        resource_id = self._defaults.get((kind, owner_id))
        if resource_id is None:
            return None
        return self._records.get((kind, resource_id))

    async def fetch_owned(
        self,
        kind: ResourceKind,
        owner_id: UserId,
        attributes: Optional[list[str]] = None,
        filter: Optional[str] = None,
    ) -> Optional[list[ResourceRecord]]:
        """List resources created by a user."""
        self.calls["fetch_owned"] += 1
        self.filters.append(("fetch_owned", filter))
        self.attributes.append(("fetch_owned", attributes))
        if not self.available:
            return None
        return sorted(
            (r for (k, _), r in self._records.items() if k == kind and r.owner == owner_id),
            key=lambda r: r.id,
        )

    async def fetch_shared(
        self,
        kind: ResourceKind,
        owner_id: UserId,
        attributes: Optional[list[str]] = None,
        filter: Optional[str] = None,
    ) -> Optional[list[ResourceRecord]]:
        """List resources created by or shared with a user."""
        self.calls["fetch_shared"] += 1
        self.filters.append(("fetch_shared", filter))
        self.attributes.append(("fetch_shared", attributes))
        if not self.available:
            return None
        return sorted(
            (
                r
                for key, r in self._records.items()
                if key[0] == kind
                and (r.owner == owner_id or owner_id in self._grants.get(key, set()))
            ),
            key=lambda r: r.id,
        )

    async def fetch_share_tier(
        self,
        tier: ShareTier,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str] = None,
    ) -> list[ResourceRecord]:
        """List mailboxes shared with a user at a tier."""
        self.calls[f"fetch_share_tier:{tier.value}"] += 1
        self.filters.append((f"fetch_share_tier:{tier.value}", filter))
        return list(self._share_tiers.get((tier, owner_id), []))

    async def fetch_groups(
        self,
        query: DirectoryQuery,
        owner_id: UserId,
        attributes: list[str],
        filter: Optional[str] = None,
    ) -> list[ResourceRecord]:
        """List groups related to a user."""
        self.calls[f"fetch_groups:{query.value}"] += 1
        self.filters.append((f"fetch_groups:{query.value}", filter))
        return list(self._groups.get((query, owner_id), []))

    async def persist(self, record: ResourceRecord) -> bool:
        """Save or update a resource."""
        self.calls["persist"] += 1
        if not self.accept_writes:
            return False
        self._records[(record.kind, record.id)] = record
        self._grants.setdefault((record.kind, record.id), set())
        return True

    async def delete(self, record: ResourceRecord) -> bool:
        """Delete a resource."""
        self.calls["delete"] += 1
        if not self.accept_writes:
            return False
        self._records.pop((record.kind, record.id), None)
        self._grants.pop((record.kind, record.id), None)
        return True
