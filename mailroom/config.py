"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mailroom.domain.value import DirectoryQuery, ResourceKind


class ServerSettings(BaseModel):
    """Per-server directory configuration."""

    # Filter overrides keyed by query; queries not listed use the backend default
    filters: dict[DirectoryQuery, str] = {}


class DirectorySettings(BaseModel):
    """Directory backend configuration."""

    # Server used for reads when an aggregate doesn't name one
    search_server: str = "default"

    # Server used when an aggregate is built for writing
    master_server: str = "master"

    servers: dict[str, ServerSettings] = {}

    # Separator between user and mailbox in an object-share uid ("jdoe.-.team")
    object_share_delimiter: str = ".-."

    def filter_for(self, server: str | None, query: DirectoryQuery) -> str | None:
        """Filter override for a query on a server.

        Unknown servers and queries without an override fall back to the
        backend's own filter (``None``).
        """
        server_settings = self.servers.get(server or self.search_server)
        if server_settings is None:
            return None
        return server_settings.filters.get(query)


class PreferenceSettings(BaseModel):
    """User preference configuration."""

    # Preference name recording the default resource of each kind
    default_names: dict[ResourceKind, str] = {
        ResourceKind.CALENDAR: "default_calendar",
        ResourceKind.TASKSLIST: "default_taskslist",
        ResourceKind.ADDRESSBOOK: "default_addressbook",
    }

    # Preferences written once a default resource has been created
    # e.g. {"calendar": {"display_cals": "a:0:{}"}}
    created_defaults: dict[ResourceKind, dict[str, str]] = {}

    def default_name(self, kind: ResourceKind) -> str:
        return self.default_names.get(kind, f"default_{kind.value}")


class CacheSettings(BaseModel):
    """External cache configuration."""

    # When False the aggregate state is kept in-process only
    enabled: bool = False
    url: str = "redis://localhost:6379/0"
    key_prefix: str = "mailroom:"
    ttl_seconds: int = 3600


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Nested sections are overridden with ``__``-delimited environment
    variables:

        DIRECTORY__SEARCH_SERVER=ldap-ro
        DIRECTORY__SERVERS='{"ldap-ro": {"filters": {"user_groups": "(member=%s)"}}}'
        CACHE__ENABLED=true
        CACHE__URL=redis://cache:6379/2
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows CACHE__URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    directory: DirectorySettings = DirectorySettings()
    preferences: PreferenceSettings = PreferenceSettings()
    cache: CacheSettings = CacheSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def check_cache_prefix(self) -> "Settings":
        """Keep cache keys namespaced."""
        if self.cache.enabled and not self.cache.key_prefix:
            raise ValueError("cache.key_prefix must not be empty when the cache is enabled")
        return self
