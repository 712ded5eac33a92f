"""Initial DocsHub schema: workspaces, members, and policies.

Identifiers are ULID strings generated in the application layer using
:func:`docshub_api.common.ids.generate_ulid`.
"""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision: Optional[str] = None
branch_labels: Optional[str] = None
depends_on: Optional[str] = None


# ---------------------------------------------------------------------------
# Types / enums
# ---------------------------------------------------------------------------

MEMBER_ROLE = sa.Enum(
    "OWNER",
    "ADMIN",
    "MEMBER",
    "EDITOR",
    "VIEWER",
    name="member_role",
    native_enum=False,
    length=20,
)


def _ulid_pk() -> sa.Column:
    return sa.Column("id", sa.String(length=26), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def upgrade() -> None:
    _create_workspaces()
    _create_workspace_members()
    _create_workspace_policies()
    _create_member_custom_policies()


def downgrade() -> None:
    op.drop_table("member_custom_policies")
    op.drop_table("workspace_policies")
    op.drop_table("workspace_members")
    op.drop_table("workspaces")


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _create_workspaces() -> None:
    op.create_table(
        "workspaces",
        _ulid_pk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="workspaces_slug_key"),
    )


def _create_workspace_members() -> None:
    op.create_table(
        "workspace_members",
        _ulid_pk(),
        sa.Column(
            "workspace_id",
            sa.String(length=26),
            sa.ForeignKey(
                "workspaces.id",
                ondelete="CASCADE",
                name="workspace_members_workspace_id_fkey",
            ),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("role", MEMBER_ROLE, nullable=False, server_default="MEMBER"),
        sa.Column("attached_policies", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "workspace_id", "user_id", name="workspace_members_workspace_id_key"
        ),
    )
    op.create_index(
        "workspace_members_workspace_id_idx",
        "workspace_members",
        ["workspace_id"],
        unique=False,
    )
    op.create_index(
        "workspace_members_user_id_idx",
        "workspace_members",
        ["user_id"],
        unique=False,
    )


def _create_workspace_policies() -> None:
    op.create_table(
        "workspace_policies",
        _ulid_pk(),
        sa.Column(
            "workspace_id",
            sa.String(length=26),
            sa.ForeignKey(
                "workspaces.id",
                ondelete="CASCADE",
                name="workspace_policies_workspace_id_fkey",
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("can_create_documents", sa.Boolean(), nullable=False),
        sa.Column("can_edit_documents", sa.Boolean(), nullable=False),
        sa.Column("can_delete_documents", sa.Boolean(), nullable=False),
        sa.Column("can_publish_documents", sa.Boolean(), nullable=False),
        sa.Column("can_invite_members", sa.Boolean(), nullable=False),
        sa.Column("can_remove_members", sa.Boolean(), nullable=False),
        sa.Column("can_manage_settings", sa.Boolean(), nullable=False),
        sa.Column("require_approval", sa.Boolean(), nullable=False),
        sa.Column("allowed_domains", sa.JSON(), nullable=False),
        sa.Column("blocked_domains", sa.JSON(), nullable=False),
        sa.Column("applies_to", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        "workspace_policies_workspace_id_idx",
        "workspace_policies",
        ["workspace_id"],
        unique=False,
    )


def _create_member_custom_policies() -> None:
    op.create_table(
        "member_custom_policies",
        _ulid_pk(),
        sa.Column(
            "member_id",
            sa.String(length=26),
            sa.ForeignKey(
                "workspace_members.id",
                ondelete="CASCADE",
                name="member_custom_policies_member_id_fkey",
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("statements", sa.JSON(), nullable=False),
        sa.Column("resource_patterns", sa.JSON(), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        sa.Column("conditions", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        "member_custom_policies_member_id_idx",
        "member_custom_policies",
        ["member_id"],
        unique=False,
    )
