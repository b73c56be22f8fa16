"""Fallback chain producing a user's default resource of a kind."""

from typing import TYPE_CHECKING, Optional

import logfire

from mailroom.domain.model.resource import Resource

from .base import Service

if TYPE_CHECKING:
    from .resource_collection import Partition, ResourceCollection


class DefaultResourceResolver(Service):
    """Resolves the default resource of a collection.

    Tiers, first hit wins:

    1. the populated shared partition
    2. the populated owned partition
    3. the directory's dedicated default lookup
    4. the owned partition, fetched if needed

    Within a tier the id recorded in the owner's default preference is
    tried first, then the owner's uid.
    """

    async def resolve(self, collection: "ResourceCollection") -> Optional[Resource]:
        owner_id = collection.owner_id()
        if owner_id is None:
            return None

        kind = collection.kind.value
        with logfire.span("default_resolver.resolve", kind=kind, uid=owner_id):
            preferred = await collection.preferences.get(
                collection.scope, collection.default_preference
            )
            candidates = tuple(dict.fromkeys((preferred or owner_id, owner_id)))

            hit = self._first(collection, collection.peek_shared(), candidates)
            if hit is not None:
                logfire.debug("Default found in shared partition", kind=kind, id=hit.id)
                return hit

            hit = self._first(collection, collection.peek_owned(), candidates)
            if hit is not None:
                logfire.debug("Default found in owned partition", kind=kind, id=hit.id)
                return hit

            record = await collection.directory.fetch_default(collection.kind, owner_id)
            if record is not None:
                logfire.debug("Default found in directory", kind=kind, id=record.id)
                return collection.wrap(record)

            hit = self._first(collection, await collection.get_owned(), candidates)
            if hit is not None:
                logfire.debug("Default found in owned listing", kind=kind, id=hit.id)
                return hit

            logfire.info("No default resource", kind=kind, uid=owner_id)
            return None

    @classmethod
    def _first(
        cls,
        collection: "ResourceCollection",
        partition: Optional["Partition"],
        candidates: tuple[str, ...],
    ) -> Optional[Resource]:
        for resource_id in candidates:
            hit = cls._lookup(collection, partition, resource_id)
            if hit is not None:
                return hit
        return None

    @staticmethod
    def _lookup(
        collection: "ResourceCollection",
        partition: Optional["Partition"],
        resource_id: str,
    ) -> Optional[Resource]:
        if not partition:
            return None
        resource = partition.get(resource_id)
        if resource is None or not resource.is_live:
            return None
        resource.attach(collection.owner)
        return resource
