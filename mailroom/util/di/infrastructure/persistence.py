"""Persistence infrastructure providers."""

from dishka import Scope, from_context

from mailroom.domain.repository import DirectoryRepository, PreferenceRepository
from mailroom.util.di.base import ProviderBase


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider.

    The directory and preference backends belong to the host application,
    which hands them to the container as context.
    """

    __is_mock__ = False

    scope = Scope.APP

    directory = from_context(provides=DirectoryRepository, scope=Scope.APP)
    preferences = from_context(provides=PreferenceRepository, scope=Scope.APP)
