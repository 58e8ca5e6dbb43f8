"""Workspace API routes.

Learn: Every route takes the verified Identity and passes its user_id
down as the owner. The service never sees a request, and a workspace
belonging to another user comes back as 404, same as a missing one.
"""

from fastapi import APIRouter, Depends, Request

from secretlane.auth.dependencies import Identity, require_identity
from secretlane.schemas.auth import MessageResponse
from secretlane.schemas.workspace import WorkspaceRead, WorkspaceWrite
from secretlane.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces")


def _svc(request: Request) -> WorkspaceService:
    return request.app.state.workspace_service


@router.post("", response_model=WorkspaceRead, status_code=201)
async def create_workspace(
    body: WorkspaceWrite,
    identity: Identity = Depends(require_identity),
    svc: WorkspaceService = Depends(_svc),
):
    return await svc.create(body.name, body.description, identity.user_id)


@router.get("", response_model=list[WorkspaceRead])
async def list_workspaces(
    identity: Identity = Depends(require_identity),
    svc: WorkspaceService = Depends(_svc),
):
    """The caller's workspaces, newest first."""
    return await svc.list_for_user(identity.user_id)


@router.get("/{workspace_id}", response_model=WorkspaceRead)
async def get_workspace(
    workspace_id: int,
    identity: Identity = Depends(require_identity),
    svc: WorkspaceService = Depends(_svc),
):
    return await svc.get(workspace_id, identity.user_id)


@router.put("/{workspace_id}", response_model=WorkspaceRead)
async def update_workspace(
    workspace_id: int,
    body: WorkspaceWrite,
    identity: Identity = Depends(require_identity),
    svc: WorkspaceService = Depends(_svc),
):
    return await svc.update(
        workspace_id, body.name, body.description, identity.user_id
    )


@router.delete("/{workspace_id}", response_model=MessageResponse)
async def delete_workspace(
    workspace_id: int,
    identity: Identity = Depends(require_identity),
    svc: WorkspaceService = Depends(_svc),
):
    await svc.delete(workspace_id, identity.user_id)
    return MessageResponse(message="workspace deleted")
