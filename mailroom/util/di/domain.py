"""Domain layer DI providers."""

from dishka import Scope, provide

from mailroom.config import CacheSettings, Settings
from mailroom.domain.repository import (
    CacheRepository,
    DirectoryRepository,
    PreferenceRepository,
)
from mailroom.domain.service import (
    CacheSync,
    DirectoryContext,
    ResourceFactory,
    UserService,
)
from mailroom.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped: aggregates built in one request
    share their collaborators, and nothing memoized outlives it.
    """

    scope = Scope.REQUEST

    @provide
    def get_resource_factory(self, directory: DirectoryRepository) -> ResourceFactory:
        """Provide resource wrapper factory."""
        return ResourceFactory(directory=directory)

    @provide
    def get_cache_sync(
        self, cache: CacheRepository, cache_settings: CacheSettings
    ) -> CacheSync:
        """Provide cache sync domain service."""
        return CacheSync(cache=cache, settings=cache_settings)

    @provide
    def get_directory_context(
        self,
        directory: DirectoryRepository,
        preferences: PreferenceRepository,
        cache_sync: CacheSync,
        factory: ResourceFactory,
        settings: Settings,
    ) -> DirectoryContext:
        """Provide collaborators shared by user aggregates."""
        return DirectoryContext(
            directory=directory,
            preferences=preferences,
            cache_sync=cache_sync,
            factory=factory,
            settings=settings,
        )

    @provide
    def get_user_service(self, context: DirectoryContext) -> UserService:
        """Provide user domain service."""
        return UserService(context=context)
