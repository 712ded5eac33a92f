"""Per-member policy routes: managed attachments, custom policies, access checks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, Security, status
from fastapi import Path as PathParam

from docshub_api.core.http import (
    SessionDep,
    WorkspaceActor,
    require_workspace_action,
    require_workspace_member,
)
from docshub_api.core.policies import PolicyStatement, list_managed_policies
from docshub_api.features.catalog.schemas import ManagedPolicyOut
from docshub_api.features.workspaces.exceptions import MemberNotFoundError
from docshub_api.features.workspaces.schemas import WorkspaceMemberOut
from docshub_api.features.workspaces.service import WorkspacesService
from docshub_api.models import WorkspaceMember

from .access import MemberAccessService
from .exceptions import CustomPolicyNotFoundError, ManagedPolicyNotFoundError
from .schemas import (
    AccessDecisionOut,
    CustomPolicyCreate,
    CustomPolicyOut,
    CustomPolicyUpdate,
    MemberPoliciesOut,
    PolicyAttachmentCreate,
    WorkspacePolicyOut,
)
from .service import MemberPoliciesService, WorkspacePoliciesService

router = APIRouter(
    prefix="/workspaces/{workspace_id}/members/{member_id}",
    tags=["policies"],
)

ATTACHMENT_BODY = Body(...)
CUSTOM_POLICY_CREATE_BODY = Body(...)
CUSTOM_POLICY_UPDATE_BODY = Body(...)

MemberIdPath = Annotated[str, PathParam(min_length=1, description="Workspace member identifier")]


async def get_target_member(
    actor: Annotated[WorkspaceActor, Depends(require_workspace_member)],
    member_id: MemberIdPath,
    session: SessionDep,
) -> WorkspaceMember:
    """Load the member named in the path, scoped to the caller's workspace.

    Routes declare their permission dependency ahead of this one so a caller
    without access is refused before member ids are looked up.
    """

    service = WorkspacesService(session=session)
    try:
        return await service.get_member(workspace_id=actor.workspace_id, member_id=member_id)
    except MemberNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def get_member_policies_service(session: SessionDep) -> MemberPoliciesService:
    return MemberPoliciesService(session=session)


TargetMember = Annotated[WorkspaceMember, Depends(get_target_member)]
member_policies_service_dependency = Depends(get_member_policies_service)


def _statement_wire(statement: PolicyStatement | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(statement, PolicyStatement):
        return statement.to_dict()
    return dict(statement)


@router.get(
    "/policies",
    response_model=MemberPoliciesOut,
    summary="Show every policy source that applies to a member",
)
async def read_member_policies(
    workspace_id: str,
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("workspace:ManagePolicies")),
    ],
    member: TargetMember,
    session: SessionDep,
    service: MemberPoliciesService = member_policies_service_dependency,
) -> MemberPoliciesOut:
    custom = await service.list_custom_policies(member, active_only=True)
    available = await WorkspacePoliciesService(session=session).list_policies(
        workspace_id, active_only=True
    )
    return MemberPoliciesOut(
        member=WorkspaceMemberOut.model_validate(member),
        attached_policies=list(member.attached_policies or []),
        custom_policies=[CustomPolicyOut.model_validate(item) for item in custom],
        available_policies=[WorkspacePolicyOut.model_validate(item) for item in available],
        managed_policies=[ManagedPolicyOut.from_policy(item) for item in list_managed_policies()],
    )


@router.post(
    "/policies/attachments",
    response_model=WorkspaceMemberOut,
    summary="Attach a managed policy to a member",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Unknown member or managed policy."}},
)
async def attach_managed_policy(
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("policies:Attach")),
    ],
    member: TargetMember,
    service: MemberPoliciesService = member_policies_service_dependency,
    *,
    payload: PolicyAttachmentCreate = ATTACHMENT_BODY,
) -> WorkspaceMemberOut:
    try:
        updated = await service.attach_managed_policy(member, payload.policy_id)
    except ManagedPolicyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return WorkspaceMemberOut.model_validate(updated)


@router.delete(
    "/policies/attachments/{policy_id}",
    response_model=WorkspaceMemberOut,
    summary="Detach a managed policy from a member",
)
async def detach_managed_policy(
    policy_id: str,
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("policies:Detach")),
    ],
    member: TargetMember,
    service: MemberPoliciesService = member_policies_service_dependency,
) -> WorkspaceMemberOut:
    updated = await service.detach_managed_policy(member, policy_id)
    return WorkspaceMemberOut.model_validate(updated)


@router.post(
    "/policies/custom",
    response_model=CustomPolicyOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a custom policy for a member",
)
async def create_custom_policy(
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("policies:Create")),
    ],
    member: TargetMember,
    service: MemberPoliciesService = member_policies_service_dependency,
    *,
    payload: CustomPolicyCreate = CUSTOM_POLICY_CREATE_BODY,
) -> CustomPolicyOut:
    policy = await service.create_custom_policy(member, payload)
    return CustomPolicyOut.model_validate(policy)


@router.patch(
    "/policies/custom/{custom_policy_id}",
    response_model=CustomPolicyOut,
    summary="Update or deactivate a member custom policy",
)
async def update_custom_policy(
    custom_policy_id: str,
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("policies:Update")),
    ],
    member: TargetMember,
    service: MemberPoliciesService = member_policies_service_dependency,
    *,
    payload: CustomPolicyUpdate = CUSTOM_POLICY_UPDATE_BODY,
) -> CustomPolicyOut:
    try:
        policy = await service.update_custom_policy(member, custom_policy_id, payload)
    except CustomPolicyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CustomPolicyOut.model_validate(policy)


@router.delete(
    "/policies/custom/{custom_policy_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a member custom policy",
    response_class=Response,
)
async def delete_custom_policy(
    custom_policy_id: str,
    _actor: Annotated[
        WorkspaceActor,
        Security(require_workspace_action("policies:Delete")),
    ],
    member: TargetMember,
    service: MemberPoliciesService = member_policies_service_dependency,
) -> Response:
    try:
        await service.delete_custom_policy(member, custom_policy_id)
    except CustomPolicyNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/access",
    response_model=AccessDecisionOut,
    summary="Explain whether a member may perform an action",
)
async def check_member_access(
    workspace_id: str,
    actor: Annotated[WorkspaceActor, Security(require_workspace_member)],
    member: TargetMember,
    session: SessionDep,
    action: Annotated[str, Query(min_length=1, max_length=255)],
    resource: Annotated[
        str | None,
        Query(min_length=1, max_length=1024, description="Defaults to the workspace id."),
    ] = None,
) -> AccessDecisionOut:
    access = MemberAccessService(session=session)
    if actor.member.id != member.id:
        await access.ensure_allowed(actor.member, "workspace:ManagePolicies", workspace_id)

    target_resource = resource or workspace_id
    decision = await access.describe(member, action, target_resource)
    return AccessDecisionOut(
        member_id=member.id,
        role=decision.role,
        action=decision.action,
        resource=decision.resource,
        allowed=decision.allowed,
        bypass=decision.bypass,
        statement_count=decision.statement_count,
        matched_allow=[_statement_wire(decision.statements[i]) for i in decision.matched_allow],
        matched_deny=[_statement_wire(decision.statements[i]) for i in decision.matched_deny],
    )


__all__ = ["router"]
