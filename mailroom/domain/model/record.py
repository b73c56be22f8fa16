"""Backend records.

Directory and preference backends hand these to the domain; the domain
hands them back to persist or delete.
"""

from typing import Any

from pydantic import Field

from mailroom.domain.model.common import DomainModel
from mailroom.domain.value import PreferenceScope, ResourceId, ResourceKind, UserId


class ResourceRecord(DomainModel):
    """A calendar, task list, address book, group or mailbox as stored.

    ``owner`` is the uid of the user that created the resource and never
    changes once set. ``raw`` carries the backend attributes verbatim.
    """

    kind: ResourceKind
    id: ResourceId
    owner: UserId | None = None
    name: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class DirectoryEntry(DomainModel):
    """A user entry of the directory."""

    dn: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)

    def first(self, name: str) -> Any:
        """First value of an attribute, multi-valued or not."""
        value = self.attributes.get(name)
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value

    def all(self, name: str) -> list[Any]:
        """Every value of an attribute as a list."""
        value = self.attributes.get(name)
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]


class PreferenceEntry(DomainModel):
    """A ``(scope, name) -> value`` preference of one user."""

    owner: UserId
    scope: PreferenceScope
    name: str
    value: str | None = None

    @property
    def key(self) -> tuple[PreferenceScope, str]:
        return (self.scope, self.name)
