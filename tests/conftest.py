"""Test configuration and fixtures."""

import logfire
import pytest

from mailroom.config import CacheSettings, Settings
from mailroom.domain.model.user import User
from mailroom.domain.service import CacheSync, DirectoryContext, ResourceFactory
from mailroom.persistence.repository.inmemory import (
    InMemoryCacheRepository,
    InMemoryDirectoryRepository,
    InMemoryPreferenceRepository,
)

# Keep test telemetry local and quiet
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def directory() -> InMemoryDirectoryRepository:
    return InMemoryDirectoryRepository()


@pytest.fixture
def preference_repository() -> InMemoryPreferenceRepository:
    return InMemoryPreferenceRepository()


@pytest.fixture
def cache() -> InMemoryCacheRepository:
    return InMemoryCacheRepository()


@pytest.fixture
def settings() -> Settings:
    """Settings with the external cache enabled."""
    return Settings(environment="test", cache=CacheSettings(enabled=True, key_prefix="test:"))


@pytest.fixture
def context(directory, preference_repository, cache, settings) -> DirectoryContext:
    """Collaborators wired to in-memory backends."""
    return DirectoryContext(
        directory=directory,
        preferences=preference_repository,
        cache_sync=CacheSync(cache=cache, settings=settings.cache),
        factory=ResourceFactory(directory=directory),
        settings=settings,
    )


@pytest.fixture
def make_user(context):
    """Build user aggregates on the in-memory context."""

    def _make_user(uid: str | None = "alice", email: str | None = None, **kwargs) -> User:
        return User(context, uid=uid, email=email, **kwargs)

    return _make_user
