"""Workspace and membership models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Enum as SAEnum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docshub_api.core.policies import MemberRole
from docshub_api.db import Base, TimestampMixin, ULIDPrimaryKeyMixin

from ._types import enum_values

if TYPE_CHECKING:
    from .policy import MemberCustomPolicy, WorkspacePolicy


class Workspace(ULIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tenant boundary owning members and workspace policies."""

    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    members: Mapped[list[WorkspaceMember]] = relationship(
        "WorkspaceMember",
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    policies: Mapped[list[WorkspacePolicy]] = relationship(
        "WorkspacePolicy",
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class WorkspaceMember(ULIDPrimaryKeyMixin, TimestampMixin, Base):
    """A user's membership in a workspace, with role and attached managed policies."""

    __tablename__ = "workspace_members"
    __table_args__ = (UniqueConstraint("workspace_id", "user_id"),)

    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[MemberRole] = mapped_column(
        SAEnum(
            MemberRole,
            name="member_role",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=MemberRole.MEMBER,
        server_default=MemberRole.MEMBER.value,
    )
    # Managed-policy ids from the static catalog; order irrelevant, no duplicates.
    attached_policies: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON),
        nullable=False,
        default=list,
    )

    workspace: Mapped[Workspace] = relationship("Workspace", back_populates="members")
    custom_policies: Mapped[list[MemberCustomPolicy]] = relationship(
        "MemberCustomPolicy",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["Workspace", "WorkspaceMember"]
