"""Domain value objects for the directory layer."""

from mailroom.domain.value.common import ValueObject
from mailroom.domain.value.identifiers import ResourceId, UserId
from mailroom.domain.value.slot import UNSET, Slot
from mailroom.domain.value.types import (
    COLLECTION_KINDS,
    DEFAULT_ATTRIBUTES,
    DirectoryQuery,
    PreferenceScope,
    ResourceKind,
    ShareTier,
    ShareType,
    normalize_attributes,
)

__all__ = [
    # Identifiers
    "UserId",
    "ResourceId",
    # Types
    "COLLECTION_KINDS",
    "DEFAULT_ATTRIBUTES",
    "DirectoryQuery",
    "PreferenceScope",
    "ResourceKind",
    "ShareTier",
    "ShareType",
    "normalize_attributes",
    # Base classes
    "ValueObject",
    "Slot",
    "UNSET",
]
