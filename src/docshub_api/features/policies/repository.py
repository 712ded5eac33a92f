"""Persistence helpers for workspace and member custom policies."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.models import MemberCustomPolicy, WorkspacePolicy


class PoliciesRepository:
    """Query helpers for persisted policies."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_workspace_policies(
        self,
        workspace_id: str,
        *,
        active_only: bool = False,
    ) -> Sequence[WorkspacePolicy]:
        stmt = select(WorkspacePolicy).where(WorkspacePolicy.workspace_id == workspace_id)
        if active_only:
            stmt = stmt.where(WorkspacePolicy.is_active.is_(True))
        stmt = stmt.order_by(WorkspacePolicy.created_at.desc(), WorkspacePolicy.id.desc())
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def get_workspace_policy(
        self,
        *,
        workspace_id: str,
        policy_id: str,
    ) -> WorkspacePolicy | None:
        stmt = select(WorkspacePolicy).where(
            WorkspacePolicy.id == policy_id,
            WorkspacePolicy.workspace_id == workspace_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_custom_policies(
        self,
        member_id: str,
        *,
        active_only: bool = False,
    ) -> Sequence[MemberCustomPolicy]:
        stmt = select(MemberCustomPolicy).where(MemberCustomPolicy.member_id == member_id)
        if active_only:
            stmt = stmt.where(MemberCustomPolicy.is_active.is_(True))
        stmt = stmt.order_by(MemberCustomPolicy.created_at.desc(), MemberCustomPolicy.id.desc())
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def get_custom_policy(
        self,
        *,
        member_id: str,
        policy_id: str,
    ) -> MemberCustomPolicy | None:
        stmt = select(MemberCustomPolicy).where(
            MemberCustomPolicy.id == policy_id,
            MemberCustomPolicy.member_id == member_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()


__all__ = ["PoliciesRepository"]
