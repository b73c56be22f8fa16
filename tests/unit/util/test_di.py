"""Unit tests for container wiring."""

import pytest

from mailroom.domain.service import UserService
from mailroom.persistence.repository.inmemory import (
    InMemoryDirectoryRepository,
    InMemoryPreferenceRepository,
)
from mailroom.util.di import CacheProvider, get_provider
from mailroom.util.di.container import create_container
from mailroom.util.di.infrastructure import ProdCacheProvider
from mailroom.util.error import ConfigurationError
from tests.di import MockCacheProvider, build_test_container


class TestGetProvider:
    """Tests for provider selection."""

    def test_selects_production_implementation(self):
        assert get_provider(CacheProvider, use_mock=False) is ProdCacheProvider

    def test_selects_mock_implementation(self):
        assert get_provider(CacheProvider, use_mock=True) is MockCacheProvider

    def test_unknown_component(self):
        with pytest.raises(ValueError):
            build_test_container(unmock={"search"})


class TestCreateContainer:
    """Tests for the production container."""

    def test_backends_required(self):
        with pytest.raises(ConfigurationError):
            create_container(None, InMemoryPreferenceRepository())

    @pytest.mark.asyncio
    async def test_resolves_user_service(self, monkeypatch):
        monkeypatch.setenv("CACHE__ENABLED", "false")
        directory = InMemoryDirectoryRepository()
        directory.add_user("alice", fullname="Alice Liddell")
        container = create_container(
            directory, InMemoryPreferenceRepository(), configure_observability=False
        )

        try:
            async with container() as request_container:
                service = await request_container.get(UserService)
                user = await service.find_user(uid="alice")
        finally:
            await container.close()

        assert user is not None
        assert user.fullname == "Alice Liddell"
