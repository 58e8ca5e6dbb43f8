"""Authenticator — credential checks and signup.

Learn: Both login failure paths (unknown username, wrong password)
raise the same AuthenticationError so callers cannot tell which one
happened. Passwords are compared exactly as stored.
"""

import structlog

from secretlane.db.models import User
from secretlane.db.users import UserStore
from secretlane.errors import AuthenticationError, ConflictError, NotFoundError

logger = structlog.get_logger()


class Authenticator:
    def __init__(self, users: UserStore):
        self.users = users

    async def login(self, username: str, password: str) -> User:
        try:
            user = await self.users.find_by_username(username)
        except NotFoundError:
            logger.info("auth.login_failed", username=username)
            raise AuthenticationError() from None

        if user.password != password:
            logger.info("auth.login_failed", username=username)
            raise AuthenticationError()

        logger.info("auth.login", user_id=user.id)
        return user

    async def signup(self, username: str, password: str) -> User:
        """Create a user. The storage unique constraint backs up the check."""
        if await self.users.exists(username):
            raise ConflictError("user already exists")

        user = await self.users.create(username, password)
        logger.info("auth.signup", user_id=user.id)
        return user
