"""User aggregate.

A ``User`` composes the lazily loaded state of one directory user: the
directory entry, preferences, calendar/task list/address book collections,
shared mailboxes and group memberships. Every piece starts unset and is
fetched on first use. Mutations clear exactly the memos they affect, and
the external cache mirror is refreshed once the outermost aggregate call
returns.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

import logfire

from mailroom.domain.error import IdentityMismatchError
from mailroom.domain.model.record import DirectoryEntry
from mailroom.domain.model.resource import Resource, SharedMailbox
from mailroom.domain.model.share import MailboxShare, ObjectShare
from mailroom.domain.model.snapshot import UserSnapshot
from mailroom.domain.value import (
    COLLECTION_KINDS,
    DirectoryQuery,
    PreferenceScope,
    ResourceId,
    ResourceKind,
    ShareTier,
    ShareType,
    Slot,
    normalize_attributes,
)

if TYPE_CHECKING:
    from mailroom.domain.service.context import DirectoryContext

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

Attributes = Union[str, list[str], tuple[str, ...], None]
Resources = dict[ResourceId, Resource]


def synced(method: F) -> F:
    """Mirror the aggregate to the external cache after a state change.

    Nested synced calls share one sync, run when the outermost returns.
    """

    @functools.wraps(method)
    async def wrapper(self: "User", *args: Any, **kwargs: Any) -> Any:
        logfire.debug(
            "User accessor called",
            method=method.__name__,
            uid=self.uid,
            server=self.server,
        )
        self._depth += 1
        try:
            return await method(self, *args, **kwargs)
        finally:
            self._depth -= 1
            if self._depth == 0 and self._dirty:
                self._dirty = False
                await self._context.cache_sync.sync(self)

    return wrapper  # type: ignore[return-value]


class User:
    """A directory user and everything lazily derived from it.

    Build it with a uid, an email address or both. Nothing is fetched
    until an accessor needs it.
    """

    cache_kind = "user"

    def __init__(
        self,
        context: "DirectoryContext",
        uid: Optional[str] = None,
        email: Optional[str] = None,
        server: Optional[str] = None,
        entry: Optional[DirectoryEntry] = None,
    ) -> None:
        """Initialize user aggregate.

        Args:
            context: Shared collaborators
            uid: User uid
            email: Primary email address
            server: Directory server, the configured search server if None
            entry: Directory entry already at hand, e.g. from a share listing

        Raises:
            IdentityMismatchError: If neither uid nor email is given
        """
        if not uid and not email:
            raise IdentityMismatchError("A user needs a uid or an email address")

        # The service package imports this module
        from mailroom.domain.service.preference_store import PreferenceStore
        from mailroom.domain.service.resource_collection import ResourceCollection
        from mailroom.domain.service.share_index import GroupIndex, ShareIndex

        settings = context.settings
        self._context = context
        self._uid = uid
        self._email = email
        self._server = server or settings.directory.search_server
        self._entry = entry
        self._is_loaded: Slot[bool] = Slot()
        self._is_exist: Slot[bool] = Slot()
        self._objectshare: Slot[Optional[ObjectShare]] = Slot()
        self._depth = 0
        self._dirty = False

        self.preferences = PreferenceStore(self, context.preferences, self._mark_dirty)
        self.collections: dict[ResourceKind, ResourceCollection] = {
            kind: ResourceCollection(
                kind,
                self,
                context.directory,
                context.factory,
                self.preferences,
                settings.preferences,
                settings.directory,
                self._mark_dirty,
            )
            for kind in COLLECTION_KINDS
        }
        self.share_index = ShareIndex(
            self, context.directory, context.factory, settings.directory, self._mark_dirty
        )
        self.group_index = GroupIndex(
            self, context.directory, context.factory, settings.directory, self._mark_dirty
        )

    # Identity

    @property
    def uid(self) -> Optional[str]:
        if self._entry is not None:
            return self._entry.first("uid") or self._uid
        return self._uid

    @property
    def email(self) -> Optional[str]:
        if self._entry is not None:
            return self._entry.first("email") or self._email
        return self._email

    @property
    def server(self) -> str:
        return self._server

    @property
    def cache_id(self) -> Optional[str]:
        return self.uid

    @property
    def entry(self) -> Optional[DirectoryEntry]:
        return self._entry

    @synced
    async def load(self, attributes: Attributes = None) -> bool:
        """Load the directory entry by uid, or by email without a uid.

        A full load is memoized. Loading an explicit attribute subset
        always queries the directory and merges the result into the
        entry, leaving the memo alone.

        Returns:
            True if the user was found
        """
        full = attributes is None
        if full and self._is_loaded.is_set:
            return self._is_loaded.get()

        attrs = normalize_attributes(attributes, DirectoryQuery.USER_INFOS)
        with logfire.span("user.load", uid=self._uid, email=self._email, server=self.server):
            entry = await self._lookup(attrs)

        if full:
            self._is_loaded.set(entry is not None)
            self._is_exist.set(entry is not None)
            self._mark_dirty()
        if entry is None:
            return False

        self._merge(entry)
        return True

    @synced
    async def exists(self) -> bool:
        """Whether the user exists in the directory. Memoized."""
        if self._is_exist.is_set:
            return self._is_exist.get()
        if self._is_loaded.is_set:
            return self._is_exist.set(self._is_loaded.get())

        with logfire.span("user.exists", uid=self._uid, email=self._email, server=self.server):
            entry = await self._lookup(["uid"])

        self._is_exist.set(entry is not None)
        self._mark_dirty()
        if entry is not None:
            self._merge(entry)
        return entry is not None

    async def _lookup(self, attributes: list[str]) -> Optional[DirectoryEntry]:
        directory_settings = self._context.settings.directory
        entry = await self._context.directory.load_user(
            self._uid,
            self._email,
            attributes,
            filter=directory_settings.filter_for(self.server, DirectoryQuery.USER_INFOS),
            filter_from_email=directory_settings.filter_for(
                self.server, DirectoryQuery.USER_INFOS_FROM_EMAIL
            ),
        )
        if entry is None:
            logfire.info("User not found", uid=self._uid, email=self._email)
            return None
        if not self._matches(entry):
            logfire.warn(
                "Directory entry doesn't match user identity",
                uid=self._uid,
                email=self._email,
                entry_uid=entry.first("uid"),
            )
            return None
        return entry

    def _matches(self, entry: DirectoryEntry) -> bool:
        entry_uid = entry.first("uid")
        if self._uid and entry_uid and entry_uid != self._uid:
            return False
        if self._uid and self._email:
            addresses = {a.lower() for a in entry.all("email") + entry.all("email_list") if a}
            if addresses and self._email.lower() not in addresses:
                return False
        return True

    def _merge(self, entry: DirectoryEntry) -> None:
        if self._entry is None:
            self._entry = entry
        else:
            self._entry = DirectoryEntry(
                dn=entry.dn or self._entry.dn,
                attributes={**self._entry.attributes, **entry.attributes},
            )
        self._mark_dirty()

    async def _ensure_uid(self) -> Optional[str]:
        if not self.uid and self._email:
            await self.load()
        return self.uid

    # Profile

    @property
    def dn(self) -> Optional[str]:
        return self._entry.dn if self._entry is not None else None

    @property
    def fullname(self) -> Optional[str]:
        return self._attribute("fullname")

    @property
    def name(self) -> Optional[str]:
        return self._attribute("name")

    @property
    def type(self) -> Optional[str]:
        return self._attribute("type")

    @property
    def email_list(self) -> list[str]:
        return self._entry.all("email_list") if self._entry is not None else []

    @property
    def email_send(self) -> Optional[str]:
        return self._attribute("email_send")

    @property
    def email_send_list(self) -> list[str]:
        return self._entry.all("email_send_list") if self._entry is not None else []

    @property
    def shares(self) -> list[MailboxShare]:
        """Access grants on the user's mailbox."""
        if self._entry is None:
            return []
        parsed = (MailboxShare.parse(str(raw)) for raw in self._entry.all("shares"))
        return [share for share in parsed if share is not None]

    @property
    def supported_shares(self) -> list[ShareType]:
        """Share types the mailbox accepts, every type unless restricted."""
        if self._entry is None or not self._entry.all("supported_shares"):
            return list(ShareType)
        supported = []
        for raw in self._entry.all("supported_shares"):
            try:
                supported.append(ShareType(raw))
            except ValueError:
                logfire.debug("Unknown share type", uid=self.uid, value=raw)
        return supported

    @property
    def is_objectshare(self) -> bool:
        return self.objectshare is not None

    @property
    def objectshare(self) -> Optional[ObjectShare]:
        """The object share this user stands for, if any."""
        if not self._objectshare.is_set:
            delimiter = self._context.settings.directory.object_share_delimiter
            share = None
            if self.uid:
                share = ObjectShare.parse(self.uid, delimiter)
            if share is None and self.email:
                share = ObjectShare.parse(self.email.split("@", 1)[0], delimiter)
            self._objectshare.set(share)
        return self._objectshare.get()

    def _attribute(self, name: str) -> Any:
        return self._entry.first(name) if self._entry is not None else None

    # Preferences

    @synced
    async def get_preference(self, scope: PreferenceScope, name: str) -> Optional[str]:
        await self._ensure_uid()
        return await self.preferences.get(scope, name)

    @synced
    async def save_preference(self, scope: PreferenceScope, name: str, value: str) -> bool:
        await self._ensure_uid()
        return await self.preferences.set(scope, name, value)

    @synced
    async def delete_preference(self, scope: PreferenceScope, name: str) -> bool:
        await self._ensure_uid()
        return await self.preferences.delete(scope, name)

    async def get_default_preference(self, name: str) -> Optional[str]:
        return await self.get_preference(PreferenceScope.DEFAULT, name)

    async def get_calendar_preference(self, name: str) -> Optional[str]:
        return await self.get_preference(PreferenceScope.CALENDAR, name)

    async def get_taskslist_preference(self, name: str) -> Optional[str]:
        return await self.get_preference(PreferenceScope.TASKSLIST, name)

    async def get_addressbook_preference(self, name: str) -> Optional[str]:
        return await self.get_preference(PreferenceScope.ADDRESSBOOK, name)

    async def save_default_preference(self, name: str, value: str) -> bool:
        return await self.save_preference(PreferenceScope.DEFAULT, name, value)

    async def save_calendar_preference(self, name: str, value: str) -> bool:
        return await self.save_preference(PreferenceScope.CALENDAR, name, value)

    async def save_taskslist_preference(self, name: str, value: str) -> bool:
        return await self.save_preference(PreferenceScope.TASKSLIST, name, value)

    async def save_addressbook_preference(self, name: str, value: str) -> bool:
        return await self.save_preference(PreferenceScope.ADDRESSBOOK, name, value)

    # Resource collections

    @synced
    async def get_default_resource(self, kind: ResourceKind) -> Optional[Resource]:
        await self._ensure_uid()
        return await self.collections[kind].get_default()

    @synced
    async def set_default_resource(
        self, kind: ResourceKind, resource: Union[Resource, str]
    ) -> bool:
        await self._ensure_uid()
        return await self.collections[kind].set_default(resource)

    @synced
    async def create_default_resource(
        self, kind: ResourceKind, name_template: Optional[str] = None
    ) -> bool:
        await self._ensure_uid()
        if name_template is None:
            await self.load()
        return await self.collections[kind].create_default(name_template)

    @synced
    async def get_user_resources(self, kind: ResourceKind) -> Resources:
        await self._ensure_uid()
        return await self.collections[kind].get_owned()

    @synced
    async def get_shared_resources(self, kind: ResourceKind) -> Resources:
        await self._ensure_uid()
        return await self.collections[kind].get_shared()

    @synced
    async def clean_resources(self, kind: ResourceKind) -> None:
        self.collections[kind].invalidate()

    @synced
    async def resource_changed(self, kind: ResourceKind) -> None:
        """A resource of a kind was saved or deleted."""
        logfire.info("User resource changed", uid=self.uid, kind=kind.value)
        if kind in self.collections:
            self.collections[kind].invalidate()
        elif kind is ResourceKind.MAILBOX:
            self.share_index.invalidate_all()
        elif kind is ResourceKind.GROUP:
            self.group_index.invalidate_all()

    async def get_default_calendar(self) -> Optional[Resource]:
        return await self.get_default_resource(ResourceKind.CALENDAR)

    async def set_default_calendar(self, calendar: Union[Resource, str]) -> bool:
        return await self.set_default_resource(ResourceKind.CALENDAR, calendar)

    async def create_default_calendar(self, name_template: Optional[str] = None) -> bool:
        return await self.create_default_resource(ResourceKind.CALENDAR, name_template)

    async def get_user_calendars(self) -> Resources:
        return await self.get_user_resources(ResourceKind.CALENDAR)

    async def get_shared_calendars(self) -> Resources:
        return await self.get_shared_resources(ResourceKind.CALENDAR)

    async def clean_calendars(self) -> None:
        await self.clean_resources(ResourceKind.CALENDAR)

    async def get_default_taskslist(self) -> Optional[Resource]:
        return await self.get_default_resource(ResourceKind.TASKSLIST)

    async def set_default_taskslist(self, taskslist: Union[Resource, str]) -> bool:
        return await self.set_default_resource(ResourceKind.TASKSLIST, taskslist)

    async def create_default_taskslist(self, name_template: Optional[str] = None) -> bool:
        return await self.create_default_resource(ResourceKind.TASKSLIST, name_template)

    async def get_user_taskslists(self) -> Resources:
        return await self.get_user_resources(ResourceKind.TASKSLIST)

    async def get_shared_taskslists(self) -> Resources:
        return await self.get_shared_resources(ResourceKind.TASKSLIST)

    async def clean_taskslists(self) -> None:
        await self.clean_resources(ResourceKind.TASKSLIST)

    async def get_default_addressbook(self) -> Optional[Resource]:
        return await self.get_default_resource(ResourceKind.ADDRESSBOOK)

    async def set_default_addressbook(self, addressbook: Union[Resource, str]) -> bool:
        return await self.set_default_resource(ResourceKind.ADDRESSBOOK, addressbook)

    async def create_default_addressbook(self, name_template: Optional[str] = None) -> bool:
        return await self.create_default_resource(ResourceKind.ADDRESSBOOK, name_template)

    async def get_user_addressbooks(self) -> Resources:
        return await self.get_user_resources(ResourceKind.ADDRESSBOOK)

    async def get_shared_addressbooks(self) -> Resources:
        return await self.get_shared_resources(ResourceKind.ADDRESSBOOK)

    async def clean_addressbooks(self) -> None:
        await self.clean_resources(ResourceKind.ADDRESSBOOK)

    # Shared mailboxes

    @synced
    async def get_objects_shared(self, attributes: Attributes = None) -> Resources:
        """Mailboxes shared with the user for reading."""
        await self._ensure_uid()
        return await self.share_index.get(ShareTier.SHARED, attributes)

    @synced
    async def get_objects_shared_send(self, attributes: Attributes = None) -> Resources:
        """Mailboxes the user may send as."""
        await self._ensure_uid()
        return await self.share_index.get(ShareTier.SEND, attributes)

    @synced
    async def get_objects_shared_manage(self, attributes: Attributes = None) -> Resources:
        """Mailboxes the user manages."""
        await self._ensure_uid()
        return await self.share_index.get(ShareTier.MANAGE, attributes)

    @synced
    async def get_shared(self, attributes: Attributes = None) -> dict[ResourceId, "User"]:
        """Owners of the mailboxes shared with the user for reading."""
        await self._ensure_uid()
        return await self.share_index.get_users(ShareTier.SHARED, self._share_user, attributes)

    @synced
    async def get_shared_send(self, attributes: Attributes = None) -> dict[ResourceId, "User"]:
        await self._ensure_uid()
        return await self.share_index.get_users(ShareTier.SEND, self._share_user, attributes)

    @synced
    async def get_shared_manage(
        self, attributes: Attributes = None
    ) -> dict[ResourceId, "User"]:
        await self._ensure_uid()
        return await self.share_index.get_users(ShareTier.MANAGE, self._share_user, attributes)

    @synced
    async def clean_shared(self) -> None:
        self.share_index.invalidate_all()

    def _share_user(self, mailbox: SharedMailbox) -> "User":
        entry = mailbox.entry
        return User(
            self._context,
            uid=entry.first("uid") or mailbox.id,
            email=entry.first("email"),
            server=self.server,
            entry=entry,
        )

    # Groups

    @synced
    async def get_groups(self, attributes: Attributes = None) -> Resources:
        """Groups the user owns."""
        await self._ensure_uid()
        return await self.group_index.get(DirectoryQuery.USER_GROUPS, attributes)

    @synced
    async def get_groups_is_member(self, attributes: Attributes = None) -> Resources:
        """Groups the user is a member of."""
        await self._ensure_uid()
        return await self.group_index.get(DirectoryQuery.GROUPS_MEMBER, attributes)

    @synced
    async def get_lists_is_member(self, attributes: Attributes = None) -> Resources:
        """Mailing lists the user is a member of."""
        await self._ensure_uid()
        return await self.group_index.get(DirectoryQuery.LISTS_MEMBER, attributes)

    # Cache

    def snapshot(self) -> UserSnapshot:
        """Cacheable view of the memoized state."""
        return UserSnapshot(
            uid=self.uid,
            email=self.email,
            server=self.server,
            entry=self._entry,
            is_loaded=self._is_loaded.peek(),
            is_exist=self._is_exist.peek(),
            collections={kind: c.snapshot() for kind, c in self.collections.items()},
            share_tiers=self.share_index.snapshot(),
            groups=self.group_index.snapshot(),
            preferences=self.preferences.entries(),
        )

    def _mark_dirty(self) -> None:
        self._dirty = True

    def __repr__(self) -> str:
        return f"User(uid={self.uid!r}, email={self.email!r}, server={self.server!r})"
