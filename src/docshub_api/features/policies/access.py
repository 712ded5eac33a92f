"""Resolve a member's policy context from the database and decide access."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.common.logging import log_context
from docshub_api.core.auth import PermissionDeniedError
from docshub_api.core.policies import (
    AccessDecision,
    MemberPolicyContext,
    MemberRole,
    describe_member_access,
    is_administrative,
)
from docshub_api.models import WorkspaceMember

from .repository import PoliciesRepository

logger = logging.getLogger(__name__)


class MemberAccessService:
    """Load the policies that apply to a member and evaluate requests."""

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._repo = PoliciesRepository(session)

    async def build_context(self, member: WorkspaceMember) -> MemberPolicyContext:
        role = MemberRole(member.role)
        if is_administrative(role):
            # Owners and admins are never evaluated.
            return MemberPolicyContext(role=role)

        workspace_policies = await self._repo.list_workspace_policies(
            member.workspace_id, active_only=True
        )
        custom_policies = await self._repo.list_custom_policies(member.id, active_only=True)
        return MemberPolicyContext(
            role=role,
            workspace_policies=tuple(workspace_policies),
            attached_policy_ids=tuple(member.attached_policies or ()),
            custom_policies=tuple(custom_policies),
        )

    async def describe(
        self,
        member: WorkspaceMember,
        action: str,
        resource: str,
    ) -> AccessDecision:
        context = await self.build_context(member)
        return describe_member_access(context, action, resource)

    async def ensure_allowed(
        self,
        member: WorkspaceMember,
        action: str,
        resource: str,
    ) -> AccessDecision:
        """Return the decision, raising :class:`PermissionDeniedError` on deny."""

        decision = await self.describe(member, action, resource)
        if not decision.allowed:
            logger.info(
                "policy.access.denied",
                extra=log_context(
                    workspace_id=member.workspace_id,
                    member_id=member.id,
                    action=action,
                    resource=resource,
                    role=decision.role.value,
                ),
            )
            raise PermissionDeniedError(
                action,
                resource=resource,
                workspace_id=member.workspace_id,
            )
        return decision


__all__ = ["MemberAccessService"]
