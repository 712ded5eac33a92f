"""FastAPI dependencies that bridge HTTP requests to the policy engine."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import Annotated

from fastapi import Depends, HTTPException, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from docshub_api.core.policies import AccessDecision, MemberRole
from docshub_api.db.session import get_db_session
from docshub_api.models import WorkspaceMember
from docshub_api.settings import Settings, get_settings

from ..auth import AuthenticatedPrincipal, principal_from_request

logger = logging.getLogger(__name__)

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_app_settings(request: Request) -> Settings:
    """Return the settings bound to the running application."""

    return getattr(request.app.state, "settings", None) or get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


async def get_current_principal(
    request: Request,
    settings: SettingsDep,
) -> AuthenticatedPrincipal:
    """Read the caller's identity from the trusted identity header."""

    return principal_from_request(request, settings.identity_header)


PrincipalDep = Annotated[AuthenticatedPrincipal, Depends(get_current_principal)]


@dataclass(slots=True, frozen=True)
class WorkspaceActor:
    """The caller resolved to a member of the workspace in the request path."""

    principal: AuthenticatedPrincipal
    member: WorkspaceMember
    decision: AccessDecision | None = None

    @property
    def workspace_id(self) -> str:
        return self.member.workspace_id

    @property
    def role(self) -> MemberRole:
        return MemberRole(self.member.role)


async def require_workspace_member(
    workspace_id: Annotated[str, Path(min_length=1, description="Workspace identifier")],
    principal: PrincipalDep,
    db: SessionDep,
) -> WorkspaceActor:
    """Ensure the caller belongs to the workspace and return their membership."""

    from docshub_api.features.workspaces.repository import WorkspacesRepository

    repo = WorkspacesRepository(db)
    workspace = await repo.get_workspace(workspace_id)
    if workspace is None:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND,
            detail=f"Workspace {workspace_id!r} not found",
        )
    member = await repo.get_member_by_user(workspace_id=workspace_id, user_id=principal.user_id)
    if member is None:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail="Workspace access denied")
    return WorkspaceActor(principal=principal, member=member)


WorkspaceActorDependency = Callable[..., Awaitable[WorkspaceActor]]


def require_workspace_action(
    action: str,
    *,
    resource_param: str | None = None,
) -> WorkspaceActorDependency:
    """Return a dependency that requires ``action`` for the acting member.

    The resource is the workspace id unless ``resource_param`` names a path
    parameter (for example ``document_id``) to check against instead.
    """

    async def dependency(
        request: Request,
        actor: Annotated[WorkspaceActor, Depends(require_workspace_member)],
        db: SessionDep,
    ) -> WorkspaceActor:
        from docshub_api.features.policies.access import MemberAccessService

        resource = actor.workspace_id
        if resource_param:
            candidate = request.path_params.get(resource_param)
            if isinstance(candidate, str) and candidate:
                resource = candidate

        service = MemberAccessService(session=db)
        decision = await service.ensure_allowed(actor.member, action, resource)
        return replace(actor, decision=decision)

    return dependency


__all__ = [
    "PrincipalDep",
    "SessionDep",
    "SettingsDep",
    "WorkspaceActor",
    "get_app_settings",
    "get_current_principal",
    "require_workspace_action",
    "require_workspace_member",
]
