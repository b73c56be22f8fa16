"""Domain value types for the directory layer.

Enumerations naming resource kinds, preference scopes, share tiers and the
directory queries whose filters can be overridden per server.
"""

from enum import Enum


class ResourceKind(str, Enum):
    """Kind of object a directory record describes."""

    CALENDAR = "calendar"
    TASKSLIST = "taskslist"
    ADDRESSBOOK = "addressbook"
    GROUP = "group"
    MAILBOX = "mailbox"


# Kinds with owned/shared/default collections on a user
COLLECTION_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.CALENDAR,
    ResourceKind.TASKSLIST,
    ResourceKind.ADDRESSBOOK,
)


class PreferenceScope(str, Enum):
    """Namespace of a preference key."""

    DEFAULT = "default"
    CALENDAR = "calendar"
    ADDRESSBOOK = "addressbook"
    TASKSLIST = "tasklist"

    @classmethod
    def for_kind(cls, kind: ResourceKind) -> "PreferenceScope":
        """Scope holding the preferences of a collection kind."""
        return _SCOPE_BY_KIND[kind]


_SCOPE_BY_KIND: dict[ResourceKind, PreferenceScope] = {
    ResourceKind.CALENDAR: PreferenceScope.CALENDAR,
    ResourceKind.TASKSLIST: PreferenceScope.TASKSLIST,
    ResourceKind.ADDRESSBOOK: PreferenceScope.ADDRESSBOOK,
}


class ShareType(str, Enum):
    """Access right granted on a mailbox."""

    READ = "L"
    WRITE = "E"
    SEND = "C"
    ADMIN = "G"


class DirectoryQuery(str, Enum):
    """Directory lookups whose filter a server configuration may override."""

    USER_INFOS = "user_infos"
    USER_INFOS_FROM_EMAIL = "user_infos_from_email"
    SHARED_MAILBOXES = "shared_mailboxes"
    SEND_MAILBOXES = "send_mailboxes"
    MANAGED_MAILBOXES = "managed_mailboxes"
    USER_GROUPS = "user_groups"
    GROUPS_MEMBER = "groups_member"
    LISTS_MEMBER = "lists_member"
    OWNED_CALENDARS = "owned_calendars"
    SHARED_CALENDARS = "shared_calendars"
    OWNED_TASKSLISTS = "owned_taskslists"
    SHARED_TASKSLISTS = "shared_taskslists"
    OWNED_ADDRESSBOOKS = "owned_addressbooks"
    SHARED_ADDRESSBOOKS = "shared_addressbooks"

    @classmethod
    def owned_listing(cls, kind: ResourceKind) -> "DirectoryQuery":
        """Query listing the resources of a kind a user created."""
        return _OWNED_QUERY_BY_KIND[kind]

    @classmethod
    def shared_listing(cls, kind: ResourceKind) -> "DirectoryQuery":
        """Query listing every resource of a kind a user can access."""
        return _SHARED_QUERY_BY_KIND[kind]


class ShareTier(str, Enum):
    """Access tier of a shared mailbox."""

    SHARED = "shared"
    SEND = "send"
    MANAGE = "manage"

    @property
    def query(self) -> DirectoryQuery:
        return _QUERY_BY_TIER[self]


_OWNED_QUERY_BY_KIND: dict[ResourceKind, DirectoryQuery] = {
    ResourceKind.CALENDAR: DirectoryQuery.OWNED_CALENDARS,
    ResourceKind.TASKSLIST: DirectoryQuery.OWNED_TASKSLISTS,
    ResourceKind.ADDRESSBOOK: DirectoryQuery.OWNED_ADDRESSBOOKS,
}

_SHARED_QUERY_BY_KIND: dict[ResourceKind, DirectoryQuery] = {
    ResourceKind.CALENDAR: DirectoryQuery.SHARED_CALENDARS,
    ResourceKind.TASKSLIST: DirectoryQuery.SHARED_TASKSLISTS,
    ResourceKind.ADDRESSBOOK: DirectoryQuery.SHARED_ADDRESSBOOKS,
}

_QUERY_BY_TIER: dict[ShareTier, DirectoryQuery] = {
    ShareTier.SHARED: DirectoryQuery.SHARED_MAILBOXES,
    ShareTier.SEND: DirectoryQuery.SEND_MAILBOXES,
    ShareTier.MANAGE: DirectoryQuery.MANAGED_MAILBOXES,
}

_USER_ATTRIBUTES = (
    "fullname",
    "uid",
    "name",
    "email",
    "email_list",
    "email_send",
    "email_send_list",
    "server_routage",
    "shares",
    "type",
)
_MAILBOX_ATTRIBUTES = ("fullname", "email_send", "email_send_list", "uid", "shares")
_GROUP_ATTRIBUTES = ("dn", "fullname", "type", "email", "members")
_RESOURCE_ATTRIBUTES = ("id", "owner", "name")

# Attributes requested when the caller doesn't name any
DEFAULT_ATTRIBUTES: dict[DirectoryQuery, tuple[str, ...]] = {
    DirectoryQuery.USER_INFOS: _USER_ATTRIBUTES,
    DirectoryQuery.USER_INFOS_FROM_EMAIL: _USER_ATTRIBUTES,
    DirectoryQuery.SHARED_MAILBOXES: _MAILBOX_ATTRIBUTES,
    DirectoryQuery.SEND_MAILBOXES: _MAILBOX_ATTRIBUTES,
    DirectoryQuery.MANAGED_MAILBOXES: _MAILBOX_ATTRIBUTES,
    DirectoryQuery.USER_GROUPS: _GROUP_ATTRIBUTES,
    DirectoryQuery.GROUPS_MEMBER: _GROUP_ATTRIBUTES,
    DirectoryQuery.LISTS_MEMBER: _GROUP_ATTRIBUTES,
    DirectoryQuery.OWNED_CALENDARS: _RESOURCE_ATTRIBUTES,
    DirectoryQuery.SHARED_CALENDARS: _RESOURCE_ATTRIBUTES,
    DirectoryQuery.OWNED_TASKSLISTS: _RESOURCE_ATTRIBUTES,
    DirectoryQuery.SHARED_TASKSLISTS: _RESOURCE_ATTRIBUTES,
    DirectoryQuery.OWNED_ADDRESSBOOKS: _RESOURCE_ATTRIBUTES,
    DirectoryQuery.SHARED_ADDRESSBOOKS: _RESOURCE_ATTRIBUTES,
}


def normalize_attributes(
    attributes: str | list[str] | tuple[str, ...] | None,
    query: DirectoryQuery,
) -> list[str]:
    """Turn a caller-supplied attribute selection into a list.

    A single attribute name is accepted as a one-element list; ``None``
    selects the query's default attributes.
    """
    if attributes is None:
        return list(DEFAULT_ATTRIBUTES[query])
    if isinstance(attributes, str):
        return [attributes]
    return list(attributes)
