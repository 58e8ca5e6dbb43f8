"""Credential store — user rows on either dialect."""

from secretlane.db.engine import Database
from secretlane.db.models import User
from secretlane.errors import ConflictError, NotFoundError


class UserStore:
    def __init__(self, db: Database):
        self.db = db

    async def find_by_username(self, username: str) -> User:
        """Raises NotFoundError when no such user exists."""
        row = await self.db.fetch_one(
            "SELECT id, username, password FROM users WHERE username = ?",
            username,
        )
        return User(id=row.id, username=row.username, password=row.password)

    async def exists(self, username: str) -> bool:
        try:
            await self.db.fetch_one("SELECT id FROM users WHERE username = ?", username)
        except NotFoundError:
            return False
        return True

    async def create(self, username: str, password: str) -> User:
        try:
            user_id = await self.db.insert(
                "INSERT INTO users (username, password) VALUES (?, ?)",
                username,
                password,
            )
        except ConflictError as e:
            raise ConflictError("user already exists") from e
        return User(id=user_id, username=username, password=password)
