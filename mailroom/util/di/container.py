"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container

from mailroom.config import Settings
from mailroom.domain.repository import DirectoryRepository, PreferenceRepository
from mailroom.util.di import PROVIDERS, get_provider
from mailroom.util.error import ConfigurationError
from mailroom.util.logging import setup_logging
from mailroom.util.observability import configure_logfire


def create_container(
    directory: DirectoryRepository,
    preferences: PreferenceRepository,
    configure_observability: bool = True,
) -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables automatically.

    Args:
        directory: The host application's directory backend
        preferences: The host application's preference backend
        configure_observability: Set up logging and Logfire from settings;
            host applications that configure their own can skip it

    Returns:
        Configured DI container with production providers

    Raises:
        ConfigurationError: If a backend is missing
    """
    if directory is None or preferences is None:
        raise ConfigurationError("Directory and preference backends are required")

    if configure_observability:
        settings = Settings()
        setup_logging(settings)
        configure_logfire(settings)

    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(
        *provider_instances,
        context={
            DirectoryRepository: directory,
            PreferenceRepository: preferences,
        },
    )
