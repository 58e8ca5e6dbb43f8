"""Resource store — workspace rows, always scoped by owning user.

Every read and write carries `created_by = ?`, so a workspace owned by
someone else is indistinguishable from one that does not exist.
"""

from typing import Optional

from sqlalchemy.engine import Row

from secretlane.db.engine import MAX_ID, Database
from secretlane.db.models import Workspace
from secretlane.errors import ConflictError, NotFoundError

_COLUMNS = "id, name, description, created_by, created_at"

DUPLICATE_NAME = "workspace with this name already exists"
NOT_FOUND = "workspace not found"


def _check_id(workspace_id: int) -> None:
    """An id no row can have is not found, before any driver sees it."""
    if not 0 < workspace_id <= MAX_ID:
        raise NotFoundError(NOT_FOUND)


class WorkspaceStore:
    def __init__(self, db: Database):
        self.db = db

    def _to_workspace(self, row: Row) -> Workspace:
        return Workspace(
            id=row.id,
            name=row.name,
            description=row.description,
            created_by=row.created_by,
            created_at=self.db.to_datetime(row.created_at),
        )

    async def count_by_name(
        self, name: str, owner_id: int, exclude_id: Optional[int] = None
    ) -> int:
        if exclude_id is None:
            row = await self.db.fetch_one(
                "SELECT COUNT(*) AS n FROM workspaces WHERE name = ? AND created_by = ?",
                name,
                owner_id,
            )
        else:
            row = await self.db.fetch_one(
                "SELECT COUNT(*) AS n FROM workspaces "
                "WHERE name = ? AND created_by = ? AND id <> ?",
                name,
                owner_id,
                exclude_id,
            )
        return row.n

    async def create(self, name: str, description: Optional[str], owner_id: int) -> int:
        try:
            return await self.db.insert(
                "INSERT INTO workspaces (name, description, created_by) VALUES (?, ?, ?)",
                name,
                description,
                owner_id,
            )
        except ConflictError as e:
            raise ConflictError(DUPLICATE_NAME) from e

    async def get(self, workspace_id: int, owner_id: int) -> Workspace:
        _check_id(workspace_id)
        try:
            row = await self.db.fetch_one(
                f"SELECT {_COLUMNS} FROM workspaces WHERE id = ? AND created_by = ?",
                workspace_id,
                owner_id,
            )
        except NotFoundError as e:
            raise NotFoundError(NOT_FOUND) from e
        return self._to_workspace(row)

    async def list_for_owner(self, owner_id: int) -> list[Workspace]:
        """Newest first. Ties on created_at fall back to insertion order."""
        rows = await self.db.fetch_all(
            f"SELECT {_COLUMNS} FROM workspaces WHERE created_by = ? "
            "ORDER BY created_at DESC, id DESC",
            owner_id,
        )
        return [self._to_workspace(row) for row in rows]

    async def update(
        self, workspace_id: int, name: str, description: Optional[str], owner_id: int
    ) -> None:
        _check_id(workspace_id)
        try:
            affected = await self.db.execute(
                "UPDATE workspaces SET name = ?, description = ? "
                "WHERE id = ? AND created_by = ?",
                name,
                description,
                workspace_id,
                owner_id,
            )
        except ConflictError as e:
            raise ConflictError(DUPLICATE_NAME) from e
        if affected == 0:
            raise NotFoundError(NOT_FOUND)

    async def delete(self, workspace_id: int, owner_id: int) -> None:
        _check_id(workspace_id)
        affected = await self.db.execute(
            "DELETE FROM workspaces WHERE id = ? AND created_by = ?",
            workspace_id,
            owner_id,
        )
        if affected == 0:
            raise NotFoundError(NOT_FOUND)
