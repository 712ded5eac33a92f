"""Workspace membership routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Response, Security, status
from fastapi import Path as PathParam

from docshub_api.core.http import WorkspaceActor, require_workspace_action

from .exceptions import (
    LastOwnerError,
    MemberAlreadyExistsError,
    MemberNotFoundError,
    OwnerRoleChangeError,
    WorkspaceNotFoundError,
)
from .router import get_workspaces_service
from .schemas import WorkspaceMemberCreate, WorkspaceMemberOut, WorkspaceMemberUpdate
from .service import WorkspacesService

router = APIRouter(prefix="/workspaces/{workspace_id}/members", tags=["workspaces"])
workspaces_service_dependency = Depends(get_workspaces_service)

WORKSPACE_MEMBER_CREATE_BODY = Body(...)
WORKSPACE_MEMBER_UPDATE_BODY = Body(...)

MemberIdPath = Annotated[str, PathParam(min_length=1, description="Workspace member identifier")]


@router.get(
    "",
    response_model=list[WorkspaceMemberOut],
    summary="List workspace members with their roles",
)
async def list_workspace_members(
    workspace_id: str,
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:ViewMembers")),
    ],
    service: WorkspacesService = workspaces_service_dependency,
) -> list[WorkspaceMemberOut]:
    try:
        members = await service.list_members(workspace_id)
    except WorkspaceNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [WorkspaceMemberOut.model_validate(member) for member in members]


@router.post(
    "",
    response_model=WorkspaceMemberOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a user to the workspace",
    responses={
        status.HTTP_403_FORBIDDEN: {"description": "Caller cannot invite or grant OWNER."},
        status.HTTP_409_CONFLICT: {"description": "User is already a member."},
    },
)
async def add_workspace_member(
    workspace_id: str,
    actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:InviteMembers")),
    ],
    service: WorkspacesService = workspaces_service_dependency,
    *,
    payload: WorkspaceMemberCreate = WORKSPACE_MEMBER_CREATE_BODY,
) -> WorkspaceMemberOut:
    try:
        member = await service.add_member(
            workspace_id=workspace_id,
            user_id=payload.user_id,
            role=payload.role,
            actor_role=actor.role,
        )
    except OwnerRoleChangeError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except MemberAlreadyExistsError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return WorkspaceMemberOut.model_validate(member)


@router.patch(
    "/{member_id}",
    response_model=WorkspaceMemberOut,
    summary="Change a member's role",
)
async def update_workspace_member(
    workspace_id: str,
    member_id: MemberIdPath,
    actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:ManageSettings")),
    ],
    service: WorkspacesService = workspaces_service_dependency,
    *,
    payload: WorkspaceMemberUpdate = WORKSPACE_MEMBER_UPDATE_BODY,
) -> WorkspaceMemberOut:
    try:
        member = await service.update_member_role(
            workspace_id=workspace_id,
            member_id=member_id,
            role=payload.role,
            actor_role=actor.role,
        )
    except MemberNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OwnerRoleChangeError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except LastOwnerError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return WorkspaceMemberOut.model_validate(member)


@router.delete(
    "/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member from the workspace",
    response_class=Response,
)
async def remove_workspace_member(
    workspace_id: str,
    member_id: MemberIdPath,
    actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:RemoveMembers")),
    ],
    service: WorkspacesService = workspaces_service_dependency,
) -> Response:
    try:
        await service.remove_member(
            workspace_id=workspace_id,
            member_id=member_id,
            actor_role=actor.role,
        )
    except MemberNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OwnerRoleChangeError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except LastOwnerError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
