"""Live resource wrappers.

A wrapper binds a backend record to the user it was fetched for. The same
wrapper instance is handed out by the user's collections, so mutating it
is visible through every collection that returned it.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Optional, Protocol

from mailroom.domain.model.record import DirectoryEntry, ResourceRecord
from mailroom.domain.value import ResourceId, ResourceKind, UserId

if TYPE_CHECKING:
    from mailroom.domain.repository.directory import DirectoryRepository


class ResourceOwner(Protocol):
    """What a resource needs to know about the user it belongs to."""

    @property
    def uid(self) -> Optional[str]: ...

    @property
    def fullname(self) -> Optional[str]: ...

    @property
    def name(self) -> Optional[str]: ...

    @property
    def email(self) -> Optional[str]: ...

    async def resource_changed(self, kind: ResourceKind) -> None: ...


class DirectoryOwner(ResourceOwner, Protocol):
    """A resource owner bound to a directory server."""

    @property
    def server(self) -> str: ...


class Resource:
    """Base wrapper around a :class:`ResourceRecord`."""

    kind: ClassVar[ResourceKind]

    def __init__(
        self,
        directory: "DirectoryRepository",
        user: Optional[ResourceOwner] = None,
    ) -> None:
        self._directory = directory
        self._user = user
        self._record: Optional[ResourceRecord] = None
        self._deleted = False
        self._owner: Optional[UserId] = None
        self.id: Optional[ResourceId] = None
        self.name: Optional[str] = None
        self.raw: dict[str, Any] = {}

    def bind(self, record: ResourceRecord) -> "Resource":
        """Absorb a backend record."""
        if record.kind != self.kind:
            raise ValueError(
                f"Cannot bind a {record.kind.value} record to a {self.kind.value}"
            )
        self._record = record
        self._deleted = False
        self.id = record.id
        self._owner = record.owner
        self.name = record.name
        self.raw = dict(record.raw)
        return self

    @property
    def record(self) -> Optional[ResourceRecord]:
        return self._record

    @property
    def owner(self) -> Optional[UserId]:
        return self._owner

    @owner.setter
    def owner(self, value: UserId) -> None:
        if self._owner is not None and self._owner != value:
            raise ValueError(f"Owner of {self.kind.value} {self.id} is already {self._owner}")
        self._owner = value

    @property
    def user(self) -> Optional[ResourceOwner]:
        return self._user

    def attach(self, user: ResourceOwner) -> None:
        """Set the user this resource is currently used on behalf of."""
        self._user = user

    @property
    def is_live(self) -> bool:
        """Bound to a backend record and not deleted since."""
        return self._record is not None and not self._deleted

    def to_record(self) -> ResourceRecord:
        if self.id is None:
            raise ValueError(f"Cannot persist a {self.kind.value} without an id")
        return ResourceRecord(
            kind=self.kind,
            id=self.id,
            owner=self._owner,
            name=self.name,
            raw=self.raw,
        )

    async def save(self) -> bool:
        """Persist the resource; membership of the user's collections may change."""
        record = self.to_record()
        if not await self._directory.persist(record):
            return False
        self._record = record
        self._deleted = False
        if self._user is not None:
            await self._user.resource_changed(self.kind)
        return True

    async def delete(self) -> bool:
        """Delete the resource. The wrapper stops being live on success."""
        if not await self._directory.delete(self.to_record()):
            return False
        self._deleted = True
        if self._user is not None:
            await self._user.resource_changed(self.kind)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, owner={self._owner!r})"


class Calendar(Resource):
    kind = ResourceKind.CALENDAR


class Taskslist(Resource):
    kind = ResourceKind.TASKSLIST


class Addressbook(Resource):
    kind = ResourceKind.ADDRESSBOOK


class Group(Resource):
    """Directory group or mailing list."""

    kind = ResourceKind.GROUP

    @property
    def email(self) -> Optional[str]:
        return self.raw.get("email")

    @property
    def members(self) -> list[str]:
        members = self.raw.get("members") or []
        return list(members) if isinstance(members, (list, tuple)) else [members]


class SharedMailbox(Resource):
    """Mailbox another user shares with the current user."""

    kind = ResourceKind.MAILBOX

    @property
    def fullname(self) -> Optional[str]:
        return self.entry.first("fullname") or self.name

    @property
    def email_send(self) -> Optional[str]:
        return self.entry.first("email_send")

    @property
    def entry(self) -> DirectoryEntry:
        """Directory entry of the mailbox, enough to build a user wrapper."""
        return DirectoryEntry(dn=self.raw.get("dn"), attributes=self.raw)
