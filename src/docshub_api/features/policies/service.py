"""Services for workspace policies and per-member policies."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.common.logging import log_context
from docshub_api.core.policies import MemberRole, get_managed_policy
from docshub_api.models import MemberCustomPolicy, WorkspaceMember, WorkspacePolicy

from .exceptions import (
    CustomPolicyNotFoundError,
    ManagedPolicyNotFoundError,
    WorkspacePolicyNotFoundError,
)
from .repository import PoliciesRepository
from .schemas import (
    CustomPolicyCreate,
    CustomPolicyUpdate,
    WorkspacePolicyCreate,
    WorkspacePolicyUpdate,
)

logger = logging.getLogger(__name__)


def _role_values(roles: Sequence[MemberRole | str]) -> list[str]:
    values: list[str] = []
    for role in roles:
        value = MemberRole(role).value
        if value not in values:
            values.append(value)
    return values


class WorkspacePoliciesService:
    """CRUD for boolean-flag workspace policies."""

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._repo = PoliciesRepository(session)

    async def list_policies(
        self,
        workspace_id: str,
        *,
        active_only: bool = False,
    ) -> Sequence[WorkspacePolicy]:
        return await self._repo.list_workspace_policies(workspace_id, active_only=active_only)

    async def get_policy(self, *, workspace_id: str, policy_id: str) -> WorkspacePolicy:
        policy = await self._repo.get_workspace_policy(
            workspace_id=workspace_id, policy_id=policy_id
        )
        if policy is None:
            raise WorkspacePolicyNotFoundError(policy_id)
        return policy

    async def create_policy(
        self,
        *,
        workspace_id: str,
        payload: WorkspacePolicyCreate,
    ) -> WorkspacePolicy:
        data = payload.model_dump()
        data["applies_to"] = _role_values(payload.applies_to)
        policy = WorkspacePolicy(workspace_id=workspace_id, is_active=True, **data)
        self._session.add(policy)
        await self._session.flush()

        logger.info(
            "policy.workspace.create",
            extra=log_context(
                workspace_id=workspace_id,
                policy_id=policy.id,
                applies_to=",".join(policy.applies_to),
            ),
        )
        return policy

    async def update_policy(
        self,
        *,
        workspace_id: str,
        policy_id: str,
        payload: WorkspacePolicyUpdate,
    ) -> WorkspacePolicy:
        policy = await self.get_policy(workspace_id=workspace_id, policy_id=policy_id)
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field != "description":
                continue
            if field == "applies_to":
                value = _role_values(value)
            setattr(policy, field, value)
        await self._session.flush()

        logger.info(
            "policy.workspace.update",
            extra=log_context(
                workspace_id=workspace_id,
                policy_id=policy_id,
                fields=",".join(sorted(changes)),
            ),
        )
        return policy

    async def delete_policy(self, *, workspace_id: str, policy_id: str) -> None:
        policy = await self.get_policy(workspace_id=workspace_id, policy_id=policy_id)
        await self._session.delete(policy)
        await self._session.flush()
        logger.info(
            "policy.workspace.delete",
            extra=log_context(workspace_id=workspace_id, policy_id=policy_id),
        )


class MemberPoliciesService:
    """Attach managed policies to members and manage their custom policies."""

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._repo = PoliciesRepository(session)

    # ------------------------------------------------------------------
    # Managed-policy attachments
    # ------------------------------------------------------------------
    async def attach_managed_policy(
        self,
        member: WorkspaceMember,
        policy_id: str,
    ) -> WorkspaceMember:
        """Attach a managed policy; attaching twice is a no-op."""

        if get_managed_policy(policy_id) is None:
            raise ManagedPolicyNotFoundError(policy_id)

        attached = list(member.attached_policies or [])
        if policy_id in attached:
            return member

        attached.append(policy_id)
        member.attached_policies = attached
        await self._session.flush()
        logger.info(
            "policy.member.attach",
            extra=log_context(
                workspace_id=member.workspace_id,
                member_id=member.id,
                policy_id=policy_id,
            ),
        )
        return member

    async def detach_managed_policy(
        self,
        member: WorkspaceMember,
        policy_id: str,
    ) -> WorkspaceMember:
        """Detach a managed policy; detaching an absent id is a no-op."""

        attached = list(member.attached_policies or [])
        if policy_id not in attached:
            return member

        member.attached_policies = [item for item in attached if item != policy_id]
        await self._session.flush()
        logger.info(
            "policy.member.detach",
            extra=log_context(
                workspace_id=member.workspace_id,
                member_id=member.id,
                policy_id=policy_id,
            ),
        )
        return member

    # ------------------------------------------------------------------
    # Custom policies
    # ------------------------------------------------------------------
    async def list_custom_policies(
        self,
        member: WorkspaceMember,
        *,
        active_only: bool = True,
    ) -> Sequence[MemberCustomPolicy]:
        return await self._repo.list_custom_policies(member.id, active_only=active_only)

    async def get_custom_policy(
        self,
        member: WorkspaceMember,
        policy_id: str,
    ) -> MemberCustomPolicy:
        policy = await self._repo.get_custom_policy(member_id=member.id, policy_id=policy_id)
        if policy is None:
            raise CustomPolicyNotFoundError(policy_id)
        return policy

    async def create_custom_policy(
        self,
        member: WorkspaceMember,
        payload: CustomPolicyCreate,
    ) -> MemberCustomPolicy:
        policy = MemberCustomPolicy(
            member_id=member.id,
            name=payload.name,
            description=payload.description,
            statements=[statement.to_wire() for statement in payload.statements],
            resource_patterns=list(payload.resource_patterns),
            actions=list(payload.actions),
            conditions=payload.conditions,
            is_active=True,
        )
        self._session.add(policy)
        await self._session.flush()

        logger.info(
            "policy.custom.create",
            extra=log_context(
                workspace_id=member.workspace_id,
                member_id=member.id,
                policy_id=policy.id,
                statement_count=len(policy.statements),
            ),
        )
        return policy

    async def update_custom_policy(
        self,
        member: WorkspaceMember,
        policy_id: str,
        payload: CustomPolicyUpdate,
    ) -> MemberCustomPolicy:
        policy = await self.get_custom_policy(member, policy_id)
        changes: dict[str, Any] = payload.model_dump(exclude_unset=True)

        for field in changes:
            if field == "statements":
                if payload.statements is None:
                    continue
                policy.statements = [statement.to_wire() for statement in payload.statements]
                continue
            value = getattr(payload, field)
            if value is None and field not in {"description", "conditions"}:
                continue
            setattr(policy, field, value)
        await self._session.flush()

        logger.info(
            "policy.custom.update",
            extra=log_context(
                workspace_id=member.workspace_id,
                member_id=member.id,
                policy_id=policy_id,
                fields=",".join(sorted(changes)),
            ),
        )
        return policy

    async def delete_custom_policy(self, member: WorkspaceMember, policy_id: str) -> None:
        policy = await self.get_custom_policy(member, policy_id)
        await self._session.delete(policy)
        await self._session.flush()
        logger.info(
            "policy.custom.delete",
            extra=log_context(
                workspace_id=member.workspace_id,
                member_id=member.id,
                policy_id=policy_id,
            ),
        )


__all__ = ["MemberPoliciesService", "WorkspacePoliciesService"]
