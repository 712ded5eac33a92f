"""Workspace routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Response, Security, status

from docshub_api.core.http import (
    PrincipalDep,
    SessionDep,
    WorkspaceActor,
    require_workspace_action,
    require_workspace_member,
)
from docshub_api.core.policies import MemberRole

from .exceptions import WorkspaceNotFoundError, WorkspaceSlugConflictError
from .schemas import WorkspaceCreate, WorkspaceOut, WorkspaceUpdate
from .service import WorkspacesService

router = APIRouter(tags=["workspaces"])


def get_workspaces_service(session: SessionDep) -> WorkspacesService:
    return WorkspacesService(session=session)


workspaces_service_dependency = Depends(get_workspaces_service)

WORKSPACE_CREATE_BODY = Body(...)
WORKSPACE_UPDATE_BODY = Body(...)


@router.post(
    "/workspaces",
    response_model=WorkspaceOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace owned by the caller",
    response_model_exclude_none=True,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Identity header missing."},
        status.HTTP_409_CONFLICT: {"description": "Workspace slug already exists."},
    },
)
async def create_workspace(
    principal: PrincipalDep,
    service: WorkspacesService = workspaces_service_dependency,
    *,
    payload: WorkspaceCreate = WORKSPACE_CREATE_BODY,
) -> WorkspaceOut:
    try:
        return await service.create_workspace(
            user_id=principal.user_id,
            name=payload.name,
            slug=payload.slug,
            description=payload.description,
        )
    except WorkspaceSlugConflictError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.get(
    "/workspaces",
    response_model=list[WorkspaceOut],
    summary="List workspaces the caller belongs to",
    response_model_exclude_none=True,
)
async def list_workspaces(
    principal: PrincipalDep,
    service: WorkspacesService = workspaces_service_dependency,
) -> list[WorkspaceOut]:
    return await service.list_workspaces(user_id=principal.user_id)


@router.get(
    "/workspaces/{workspace_id}",
    response_model=WorkspaceOut,
    summary="Retrieve a workspace",
    response_model_exclude_none=True,
    responses={
        status.HTTP_403_FORBIDDEN: {"description": "Caller is not a member."},
        status.HTTP_404_NOT_FOUND: {"description": "Workspace not found."},
    },
)
async def read_workspace(
    workspace_id: str,
    actor: Annotated[WorkspaceActor, Security(require_workspace_member)],
    service: WorkspacesService = workspaces_service_dependency,
) -> WorkspaceOut:
    try:
        return await service.get_workspace(workspace_id, role=actor.role)
    except WorkspaceNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.patch(
    "/workspaces/{workspace_id}",
    response_model=WorkspaceOut,
    summary="Update workspace metadata",
    response_model_exclude_none=True,
)
async def update_workspace(
    workspace_id: str,
    actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:ManageSettings")),
    ],
    service: WorkspacesService = workspaces_service_dependency,
    *,
    payload: WorkspaceUpdate = WORKSPACE_UPDATE_BODY,
) -> WorkspaceOut:
    try:
        return await service.update_workspace(
            workspace_id,
            name=payload.name,
            description=payload.description,
            role=actor.role,
        )
    except WorkspaceNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete(
    "/workspaces/{workspace_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a workspace (owners only)",
    response_class=Response,
)
async def delete_workspace(
    workspace_id: str,
    actor: Annotated[WorkspaceActor, Security(require_workspace_member)],
    service: WorkspacesService = workspaces_service_dependency,
) -> Response:
    if actor.role is not MemberRole.OWNER:
        raise HTTPException(
            status.HTTP_403_FORBIDDEN,
            detail="Only workspace owners can delete a workspace",
        )
    try:
        await service.delete_workspace(workspace_id)
    except WorkspaceNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["get_workspaces_service", "router"]
