"""Routes exposing the static action vocabulary and managed policies."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Security, status

from docshub_api.core.http import get_current_principal
from docshub_api.core.policies import (
    get_managed_policy,
    list_actions,
    list_custom_policy_examples,
    list_managed_policies,
)

from .schemas import ActionOut, ManagedPolicyOut, PolicyTemplateOut

router = APIRouter(
    prefix="/policies",
    tags=["policies"],
    dependencies=[Security(get_current_principal)],
)


@router.get(
    "/actions",
    response_model=list[ActionOut],
    summary="List every known policy action",
)
async def read_actions() -> list[ActionOut]:
    return [ActionOut(action=action, description=text) for action, text in list_actions()]


@router.get(
    "/managed",
    response_model=list[ManagedPolicyOut],
    summary="List managed policies",
)
async def read_managed_policies() -> list[ManagedPolicyOut]:
    return [ManagedPolicyOut.from_policy(policy) for policy in list_managed_policies()]


@router.get(
    "/managed/{policy_id}",
    response_model=ManagedPolicyOut,
    summary="Retrieve one managed policy",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Managed policy not found."}},
)
async def read_managed_policy(policy_id: str) -> ManagedPolicyOut:
    policy = get_managed_policy(policy_id)
    if policy is None:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND,
            detail=f"Managed policy {policy_id!r} not found",
        )
    return ManagedPolicyOut.from_policy(policy)


@router.get(
    "/examples",
    response_model=list[PolicyTemplateOut],
    summary="List example custom policies",
)
async def read_policy_examples() -> list[PolicyTemplateOut]:
    return [PolicyTemplateOut.from_template(item) for item in list_custom_policy_examples()]


__all__ = ["router"]
