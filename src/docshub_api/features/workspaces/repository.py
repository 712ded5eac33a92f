"""Workspace persistence helpers."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.core.policies import MemberRole
from docshub_api.models import Workspace, WorkspaceMember


class WorkspacesRepository:
    """Query helpers for workspaces and their members."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_workspace(self, workspace_id: str) -> Workspace | None:
        return await self._session.get(Workspace, workspace_id)

    async def get_workspace_by_slug(self, slug: str) -> Workspace | None:
        stmt = select(Workspace).where(Workspace.slug == slug)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_workspaces_for_user(self, user_id: str) -> Sequence[Workspace]:
        stmt = (
            select(Workspace)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(WorkspaceMember.user_id == user_id)
            .order_by(Workspace.name, Workspace.id)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def get_member(self, *, workspace_id: str, member_id: str) -> WorkspaceMember | None:
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.id == member_id,
            WorkspaceMember.workspace_id == workspace_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_member_by_user(
        self,
        *,
        workspace_id: str,
        user_id: str,
    ) -> WorkspaceMember | None:
        stmt = select(WorkspaceMember).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_members(self, workspace_id: str) -> Sequence[WorkspaceMember]:
        stmt = (
            select(WorkspaceMember)
            .where(WorkspaceMember.workspace_id == workspace_id)
            .order_by(WorkspaceMember.created_at, WorkspaceMember.id)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def count_owners(self, workspace_id: str) -> int:
        stmt = select(func.count(WorkspaceMember.id)).where(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.role == MemberRole.OWNER,
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


__all__ = ["WorkspacesRepository"]
