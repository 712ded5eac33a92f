"""Workspace policy routes (boolean-flag policies applied by role)."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, Security, status
from fastapi import Path as PathParam

from docshub_api.core.http import SessionDep, WorkspaceActor, require_workspace_action

from .exceptions import WorkspacePolicyNotFoundError
from .schemas import WorkspacePolicyCreate, WorkspacePolicyOut, WorkspacePolicyUpdate
from .service import WorkspacePoliciesService

router = APIRouter(prefix="/workspaces/{workspace_id}/policies", tags=["policies"])


def get_workspace_policies_service(session: SessionDep) -> WorkspacePoliciesService:
    return WorkspacePoliciesService(session=session)


policies_service_dependency = Depends(get_workspace_policies_service)
require_manage_policies = require_workspace_action("workspace:ManagePolicies")

WORKSPACE_POLICY_CREATE_BODY = Body(...)
WORKSPACE_POLICY_UPDATE_BODY = Body(...)

PolicyIdPath = Annotated[str, PathParam(min_length=1, description="Workspace policy identifier")]


@router.get(
    "",
    response_model=list[WorkspacePolicyOut],
    summary="List workspace policies, newest first",
)
async def list_workspace_policies(
    workspace_id: str,
    _actor: Annotated[WorkspaceActor, Security(require_manage_policies)],
    active_only: Annotated[
        bool,
        Query(description="Only return active policies."),
    ] = False,
    service: WorkspacePoliciesService = policies_service_dependency,
) -> list[WorkspacePolicyOut]:
    policies = await service.list_policies(workspace_id, active_only=active_only)
    return [WorkspacePolicyOut.model_validate(policy) for policy in policies]


@router.post(
    "",
    response_model=WorkspacePolicyOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace policy",
)
async def create_workspace_policy(
    workspace_id: str,
    _actor: Annotated[WorkspaceActor, Security(require_manage_policies)],
    service: WorkspacePoliciesService = policies_service_dependency,
    *,
    payload: WorkspacePolicyCreate = WORKSPACE_POLICY_CREATE_BODY,
) -> WorkspacePolicyOut:
    policy = await service.create_policy(workspace_id=workspace_id, payload=payload)
    return WorkspacePolicyOut.model_validate(policy)


@router.patch(
    "/{policy_id}",
    response_model=WorkspacePolicyOut,
    summary="Update or deactivate a workspace policy",
)
async def update_workspace_policy(
    workspace_id: str,
    policy_id: PolicyIdPath,
    _actor: Annotated[WorkspaceActor, Security(require_manage_policies)],
    service: WorkspacePoliciesService = policies_service_dependency,
    *,
    payload: WorkspacePolicyUpdate = WORKSPACE_POLICY_UPDATE_BODY,
) -> WorkspacePolicyOut:
    try:
        policy = await service.update_policy(
            workspace_id=workspace_id,
            policy_id=policy_id,
            payload=payload,
        )
    except WorkspacePolicyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return WorkspacePolicyOut.model_validate(policy)


@router.delete(
    "/{policy_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a workspace policy",
    response_class=Response,
)
async def delete_workspace_policy(
    workspace_id: str,
    policy_id: PolicyIdPath,
    _actor: Annotated[WorkspaceActor, Security(require_manage_policies)],
    service: WorkspacePoliciesService = policies_service_dependency,
) -> Response:
    try:
        await service.delete_policy(workspace_id=workspace_id, policy_id=policy_id)
    except WorkspacePolicyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
