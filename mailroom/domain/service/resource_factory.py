"""Construction of resource wrappers by kind."""

from typing import Optional

from mailroom.domain.model.record import ResourceRecord
from mailroom.domain.model.resource import (
    Addressbook,
    Calendar,
    Group,
    Resource,
    ResourceOwner,
    SharedMailbox,
    Taskslist,
)
from mailroom.domain.repository import DirectoryRepository
from mailroom.domain.value import ResourceKind

from .base import Service

DEFAULT_RESOURCE_CLASSES: dict[ResourceKind, type[Resource]] = {
    ResourceKind.CALENDAR: Calendar,
    ResourceKind.TASKSLIST: Taskslist,
    ResourceKind.ADDRESSBOOK: Addressbook,
    ResourceKind.GROUP: Group,
    ResourceKind.MAILBOX: SharedMailbox,
}


class ResourceFactory(Service):
    """Builds resource wrappers from a kind tag.

    Deployments with their own wrapper subclasses pass a different class
    table; nothing looks classes up by name.
    """

    def __init__(
        self,
        directory: DirectoryRepository,
        classes: Optional[dict[ResourceKind, type[Resource]]] = None,
    ) -> None:
        """Initialize resource factory.

        Args:
            directory: Directory repository the wrappers persist through
            classes: Wrapper class per kind
        """
        self.directory = directory
        self.classes = {**DEFAULT_RESOURCE_CLASSES, **(classes or {})}

    def create(self, kind: ResourceKind, user: Optional[ResourceOwner] = None) -> Resource:
        """New, unbound wrapper of a kind."""
        return self.classes[kind](self.directory, user)

    def wrap(self, record: ResourceRecord, user: Optional[ResourceOwner] = None) -> Resource:
        """Wrapper bound to a backend record."""
        return self.create(record.kind, user).bind(record)
