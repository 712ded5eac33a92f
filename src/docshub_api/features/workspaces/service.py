"""Workspace and membership services."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.common.ids import generate_ulid
from docshub_api.common.logging import log_context
from docshub_api.core.policies import MemberRole
from docshub_api.models import Workspace, WorkspaceMember

from .exceptions import (
    LastOwnerError,
    MemberAlreadyExistsError,
    MemberNotFoundError,
    OwnerRoleChangeError,
    WorkspaceNotFoundError,
    WorkspaceSlugConflictError,
)
from .repository import WorkspacesRepository
from .schemas import WorkspaceOut

logger = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_SLUG_MAX_LENGTH = 100


def _slugify(value: str) -> str:
    candidate = _SLUG_PATTERN.sub("-", value.lower()).strip("-")
    candidate = re.sub(r"-{2,}", "-", candidate)
    return candidate[:_SLUG_MAX_LENGTH].strip("-")


class WorkspacesService:
    """Create workspaces and manage who belongs to them."""

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._repo = WorkspacesRepository(session)

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------
    async def create_workspace(
        self,
        *,
        user_id: str,
        name: str,
        slug: str | None = None,
        description: str | None = None,
    ) -> WorkspaceOut:
        """Create a workspace and make ``user_id`` its first OWNER."""

        resolved_slug = await self._resolve_slug(name=name, requested=slug)
        workspace = Workspace(name=name.strip(), slug=resolved_slug, description=description)
        self._session.add(workspace)
        await self._session.flush()

        owner = WorkspaceMember(
            workspace_id=workspace.id,
            user_id=user_id,
            role=MemberRole.OWNER,
            attached_policies=[],
        )
        self._session.add(owner)
        await self._session.flush()

        logger.info(
            "workspace.create",
            extra=log_context(workspace_id=workspace.id, user_id=user_id, slug=resolved_slug),
        )
        return self._to_out(workspace, role=MemberRole.OWNER)

    async def _resolve_slug(self, *, name: str, requested: str | None) -> str:
        if requested is not None:
            slug = _slugify(requested)
            if not slug:
                raise ValueError("Workspace slug must contain letters or digits")
            if await self._repo.get_workspace_by_slug(slug) is not None:
                raise WorkspaceSlugConflictError(slug)
            return slug

        base = _slugify(name) or "workspace"
        slug = base
        while await self._repo.get_workspace_by_slug(slug) is not None:
            suffix = generate_ulid()[-6:].lower()
            slug = f"{base[: _SLUG_MAX_LENGTH - len(suffix) - 1]}-{suffix}"
        return slug

    async def list_workspaces(self, *, user_id: str) -> list[WorkspaceOut]:
        workspaces = await self._repo.list_workspaces_for_user(user_id)
        results: list[WorkspaceOut] = []
        for workspace in workspaces:
            member = await self._repo.get_member_by_user(
                workspace_id=workspace.id, user_id=user_id
            )
            results.append(self._to_out(workspace, role=member.role if member else None))
        return results

    async def get_workspace(
        self, workspace_id: str, *, role: MemberRole | None = None
    ) -> WorkspaceOut:
        workspace = await self._require_workspace(workspace_id)
        return self._to_out(workspace, role=role)

    async def update_workspace(
        self,
        workspace_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        role: MemberRole | None = None,
    ) -> WorkspaceOut:
        workspace = await self._require_workspace(workspace_id)
        if name is not None:
            workspace.name = name.strip()
        if description is not None:
            workspace.description = description
        await self._session.flush()
        logger.info("workspace.update", extra=log_context(workspace_id=workspace_id))
        return self._to_out(workspace, role=role)

    async def delete_workspace(self, workspace_id: str) -> None:
        """Delete a workspace; members and workspace policies cascade."""

        workspace = await self._require_workspace(workspace_id)
        await self._session.delete(workspace)
        await self._session.flush()
        logger.info("workspace.delete", extra=log_context(workspace_id=workspace_id))

    async def _require_workspace(self, workspace_id: str) -> Workspace:
        workspace = await self._repo.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    @staticmethod
    def _to_out(workspace: Workspace, *, role: MemberRole | str | None) -> WorkspaceOut:
        return WorkspaceOut(
            id=workspace.id,
            name=workspace.name,
            slug=workspace.slug,
            description=workspace.description,
            role=MemberRole(role) if role is not None else None,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------
    async def list_members(self, workspace_id: str) -> Sequence[WorkspaceMember]:
        await self._require_workspace(workspace_id)
        return await self._repo.list_members(workspace_id)

    async def get_member(self, *, workspace_id: str, member_id: str) -> WorkspaceMember:
        member = await self._repo.get_member(workspace_id=workspace_id, member_id=member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    async def add_member(
        self,
        *,
        workspace_id: str,
        user_id: str,
        role: MemberRole,
        actor_role: MemberRole,
    ) -> WorkspaceMember:
        """Add ``user_id`` to the workspace. Only owners may grant OWNER."""

        await self._require_workspace(workspace_id)
        role = MemberRole(role)
        if role is MemberRole.OWNER and actor_role is not MemberRole.OWNER:
            raise OwnerRoleChangeError("Only workspace owners can grant the OWNER role")

        existing = await self._repo.get_member_by_user(workspace_id=workspace_id, user_id=user_id)
        if existing is not None:
            raise MemberAlreadyExistsError(user_id)

        member = WorkspaceMember(
            workspace_id=workspace_id,
            user_id=user_id,
            role=role,
            attached_policies=[],
        )
        self._session.add(member)
        await self._session.flush()

        logger.info(
            "workspace.member.add",
            extra=log_context(
                workspace_id=workspace_id,
                member_id=member.id,
                user_id=user_id,
                role=role.value,
            ),
        )
        return member

    async def update_member_role(
        self,
        *,
        workspace_id: str,
        member_id: str,
        role: MemberRole,
        actor_role: MemberRole,
    ) -> WorkspaceMember:
        member = await self.get_member(workspace_id=workspace_id, member_id=member_id)
        role = MemberRole(role)
        current = MemberRole(member.role)
        if current is role:
            return member

        if MemberRole.OWNER in (current, role) and actor_role is not MemberRole.OWNER:
            raise OwnerRoleChangeError()
        if current is MemberRole.OWNER and await self._repo.count_owners(workspace_id) <= 1:
            raise LastOwnerError()

        member.role = role
        await self._session.flush()
        logger.info(
            "workspace.member.role_change",
            extra=log_context(
                workspace_id=workspace_id,
                member_id=member_id,
                previous_role=current.value,
                role=role.value,
            ),
        )
        return member

    async def remove_member(
        self,
        *,
        workspace_id: str,
        member_id: str,
        actor_role: MemberRole,
    ) -> None:
        """Remove a member; their custom policies cascade."""

        member = await self.get_member(workspace_id=workspace_id, member_id=member_id)
        if MemberRole(member.role) is MemberRole.OWNER:
            if actor_role is not MemberRole.OWNER:
                raise OwnerRoleChangeError("Only workspace owners can remove an owner")
            if await self._repo.count_owners(workspace_id) <= 1:
                raise LastOwnerError()

        await self._session.delete(member)
        await self._session.flush()
        logger.info(
            "workspace.member.remove",
            extra=log_context(workspace_id=workspace_id, member_id=member_id),
        )


__all__ = ["WorkspacesService"]
