"""Schemas for workspace and membership payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from docshub_api.common.schema import BaseSchema
from docshub_api.core.policies import MemberRole


class WorkspaceOut(BaseSchema):
    """Workspace information decorated with the caller's role."""

    id: str
    name: str
    slug: str
    description: str | None = None
    role: MemberRole | None = None
    created_at: datetime
    updated_at: datetime


class WorkspaceCreate(BaseSchema):
    """Payload for creating a workspace."""

    name: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)


class WorkspaceUpdate(BaseSchema):
    """Payload for updating workspace metadata."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class WorkspaceMemberOut(BaseSchema):
    id: str
    workspace_id: str
    user_id: str
    role: MemberRole
    attached_policies: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class WorkspaceMemberCreate(BaseSchema):
    """Payload for adding a user to a workspace."""

    user_id: str = Field(min_length=1, max_length=255)
    role: MemberRole = MemberRole.MEMBER


class WorkspaceMemberUpdate(BaseSchema):
    role: MemberRole


__all__ = [
    "WorkspaceCreate",
    "WorkspaceMemberCreate",
    "WorkspaceMemberOut",
    "WorkspaceMemberUpdate",
    "WorkspaceOut",
    "WorkspaceUpdate",
]
