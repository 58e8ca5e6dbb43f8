"""Workspace service — business rules over the resource store.

Learn: The only rule beyond ownership scoping is that a user's
workspace names are unique. The count check gives a clean error in the
common case; the (name, created_by) unique constraint catches the race
where two creates pass the check together.
"""

from typing import Optional

import structlog

from secretlane.db.models import Workspace
from secretlane.db.workspaces import DUPLICATE_NAME, WorkspaceStore
from secretlane.errors import ConflictError, ValidationError

logger = structlog.get_logger()


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("workspace name is required")
    return name


class WorkspaceService:
    def __init__(self, store: WorkspaceStore):
        self.store = store

    async def create(
        self, name: str, description: Optional[str], owner_id: int
    ) -> Workspace:
        name = _clean_name(name)
        if await self.store.count_by_name(name, owner_id) > 0:
            raise ConflictError(DUPLICATE_NAME)

        workspace_id = await self.store.create(name, description, owner_id)
        logger.info("workspace.created", workspace_id=workspace_id, owner_id=owner_id)
        return await self.store.get(workspace_id, owner_id)

    async def list_for_user(self, owner_id: int) -> list[Workspace]:
        return await self.store.list_for_owner(owner_id)

    async def get(self, workspace_id: int, owner_id: int) -> Workspace:
        return await self.store.get(workspace_id, owner_id)

    async def update(
        self,
        workspace_id: int,
        name: str,
        description: Optional[str],
        owner_id: int,
    ) -> Workspace:
        name = _clean_name(name)
        await self.store.get(workspace_id, owner_id)
        if await self.store.count_by_name(name, owner_id, exclude_id=workspace_id) > 0:
            raise ConflictError(DUPLICATE_NAME)

        await self.store.update(workspace_id, name, description, owner_id)
        logger.info("workspace.updated", workspace_id=workspace_id, owner_id=owner_id)
        return await self.store.get(workspace_id, owner_id)

    async def delete(self, workspace_id: int, owner_id: int) -> None:
        await self.store.delete(workspace_id, owner_id)
        logger.info("workspace.deleted", workspace_id=workspace_id, owner_id=owner_id)
