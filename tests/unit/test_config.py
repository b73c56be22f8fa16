"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from mailroom.config import CacheSettings, DirectorySettings, ServerSettings, Settings
from mailroom.domain.value import DirectoryQuery


class TestDirectorySettings:
    """Tests for per-server filter overrides."""

    def test_unknown_server_uses_backend_filter(self):
        settings = DirectorySettings()

        assert settings.filter_for("ldap-ro", DirectoryQuery.USER_GROUPS) is None

    def test_override_on_named_server(self):
        settings = DirectorySettings(
            servers={"ldap-ro": ServerSettings(filters={DirectoryQuery.USER_GROUPS: "(o=%s)"})}
        )

        assert settings.filter_for("ldap-ro", DirectoryQuery.USER_GROUPS) == "(o=%s)"
        assert settings.filter_for("ldap-ro", DirectoryQuery.LISTS_MEMBER) is None

    def test_no_server_means_search_server(self):
        settings = DirectorySettings(
            search_server="ldap-ro",
            servers={"ldap-ro": ServerSettings(filters={DirectoryQuery.USER_INFOS: "(uid=%s)"})},
        )

        assert settings.filter_for(None, DirectoryQuery.USER_INFOS) == "(uid=%s)"


class TestSettings:
    """Tests for environment loading and validation."""

    def test_nested_environment_override(self, monkeypatch):
        monkeypatch.setenv("CACHE__ENABLED", "true")
        monkeypatch.setenv("CACHE__TTL_SECONDS", "60")
        monkeypatch.setenv("DIRECTORY__SEARCH_SERVER", "ldap-ro")

        settings = Settings(_env_file=None)

        assert settings.cache.enabled is True
        assert settings.cache.ttl_seconds == 60
        assert settings.directory.search_server == "ldap-ro"

    def test_enabled_cache_needs_a_prefix(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cache=CacheSettings(enabled=True, key_prefix=""))

    def test_disabled_cache_accepts_empty_prefix(self):
        settings = Settings(_env_file=None, cache=CacheSettings(key_prefix=""))

        assert settings.cache.enabled is False
