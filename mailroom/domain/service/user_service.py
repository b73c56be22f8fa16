"""User domain service."""

from typing import Optional

import logfire

from mailroom.domain.error import NotFoundError
from mailroom.domain.model.user import User

from .base import Service
from .context import DirectoryContext


class UserService(Service):
    """Domain service building user aggregates."""

    def __init__(self, context: DirectoryContext) -> None:
        """Initialize user service.

        Args:
            context: Collaborators shared by the aggregates it builds
        """
        self.context = context

    def get_user(
        self,
        uid: Optional[str] = None,
        email: Optional[str] = None,
        server: Optional[str] = None,
        master: bool = False,
    ) -> User:
        """Build a user aggregate without loading it.

        Args:
            uid: User uid
            email: Primary email address
            server: Directory server, the search server if None
            master: Use the master server, for aggregates built to write

        Raises:
            IdentityMismatchError: If neither uid nor email is given
        """
        directory_settings = self.context.settings.directory
        if master:
            server = directory_settings.master_server
        return User(self.context, uid=uid, email=email, server=server)

    async def find_user(
        self,
        uid: Optional[str] = None,
        email: Optional[str] = None,
        server: Optional[str] = None,
        master: bool = False,
    ) -> Optional[User]:
        """Load a user.

        Returns:
            The loaded user, None if the directory doesn't know it
        """
        with logfire.span("user_service.find_user", uid=uid, email=email):
            user = self.get_user(uid=uid, email=email, server=server, master=master)
            if not await user.load():
                logfire.warn("User not found", uid=uid, email=email)
                return None
            logfire.info("User found", uid=user.uid, server=user.server)
            return user

    async def require_user(
        self,
        uid: Optional[str] = None,
        email: Optional[str] = None,
        server: Optional[str] = None,
        master: bool = False,
    ) -> User:
        """Load a user that must exist.

        Raises:
            NotFoundError: If the directory doesn't know the user
        """
        user = await self.find_user(uid=uid, email=email, server=server, master=master)
        if user is None:
            raise NotFoundError("User", uid or email or "")
        return user
