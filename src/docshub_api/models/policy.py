"""Persisted workspace policies and member custom policies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docshub_api.core.policies import MemberRole
from docshub_api.db import Base, TimestampMixin, ULIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .workspace import Workspace, WorkspaceMember


def _default_applies_to() -> list[str]:
    return [MemberRole.MEMBER.value]


class WorkspacePolicy(ULIDPrimaryKeyMixin, TimestampMixin, Base):
    """Boolean-flag policy applied to every member whose role is in ``applies_to``."""

    __tablename__ = "workspace_policies"

    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    can_create_documents: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_edit_documents: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_delete_documents: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_publish_documents: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_invite_members: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_remove_members: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_manage_settings: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Stored for clients; these do not produce statements.
    require_approval: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    allowed_domains: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    blocked_domains: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )

    applies_to: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=_default_applies_to
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="policies")


class MemberCustomPolicy(ULIDPrimaryKeyMixin, TimestampMixin, Base):
    """Statements owned by exactly one workspace member."""

    __tablename__ = "member_custom_policies"

    member_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspace_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    statements: Mapped[list[dict[str, Any]]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    resource_patterns: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    actions: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), nullable=False, default=list
    )
    conditions: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    member: Mapped[WorkspaceMember] = relationship(
        "WorkspaceMember", back_populates="custom_policies"
    )


__all__ = ["MemberCustomPolicy", "WorkspacePolicy"]
