"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from mailroom.config import (
    CacheSettings,
    DirectorySettings,
    PreferenceSettings,
    Settings,
)
from mailroom.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_directory_settings(self, settings: Settings) -> DirectorySettings:
        """Provide directory settings."""
        return settings.directory

    @provide(scope=Scope.APP)
    def provide_preference_settings(self, settings: Settings) -> PreferenceSettings:
        """Provide preference settings."""
        return settings.preferences

    @provide(scope=Scope.APP)
    def provide_cache_settings(self, settings: Settings) -> CacheSettings:
        """Provide cache settings."""
        return settings.cache
