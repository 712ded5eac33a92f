"""Schemas for workspace policies, member policies, and access checks."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import Field

from docshub_api.common.schema import BaseSchema
from docshub_api.core.policies import Effect, MemberRole, PolicyStatement
from docshub_api.features.catalog.schemas import ManagedPolicyOut
from docshub_api.features.workspaces.schemas import WorkspaceMemberOut

NonEmptyStr = Annotated[str, Field(min_length=1, max_length=255)]


class PolicyStatementSchema(BaseSchema):
    """Statement in wire format (``Effect``/``Action``/``Resource``/``Condition``)."""

    effect: Effect = Field(alias="Effect")
    actions: list[NonEmptyStr] = Field(alias="Action", min_length=1)
    resources: list[NonEmptyStr] = Field(alias="Resource", min_length=1)
    condition: dict[str, Any] | None = Field(default=None, alias="Condition")

    def to_statement(self) -> PolicyStatement:
        return PolicyStatement.from_dict(self.to_wire())

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Workspace policies
# ---------------------------------------------------------------------------


class WorkspacePolicyCreate(BaseSchema):
    """Payload for creating a boolean-flag workspace policy."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)

    can_create_documents: bool = True
    can_edit_documents: bool = True
    can_delete_documents: bool = False
    can_publish_documents: bool = False
    can_invite_members: bool = False
    can_remove_members: bool = False
    can_manage_settings: bool = False

    require_approval: bool = False
    allowed_domains: list[NonEmptyStr] = Field(default_factory=list)
    blocked_domains: list[NonEmptyStr] = Field(default_factory=list)
    applies_to: list[MemberRole] = Field(default_factory=lambda: [MemberRole.MEMBER])


class WorkspacePolicyUpdate(BaseSchema):
    """Partial update; ``is_active=false`` soft-deactivates the policy."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)

    can_create_documents: bool | None = None
    can_edit_documents: bool | None = None
    can_delete_documents: bool | None = None
    can_publish_documents: bool | None = None
    can_invite_members: bool | None = None
    can_remove_members: bool | None = None
    can_manage_settings: bool | None = None

    require_approval: bool | None = None
    allowed_domains: list[NonEmptyStr] | None = None
    blocked_domains: list[NonEmptyStr] | None = None
    applies_to: list[MemberRole] | None = None
    is_active: bool | None = None


class WorkspacePolicyOut(BaseSchema):
    id: str
    workspace_id: str
    name: str
    description: str | None = None

    can_create_documents: bool
    can_edit_documents: bool
    can_delete_documents: bool
    can_publish_documents: bool
    can_invite_members: bool
    can_remove_members: bool
    can_manage_settings: bool

    require_approval: bool
    allowed_domains: list[str]
    blocked_domains: list[str]
    applies_to: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Member policies
# ---------------------------------------------------------------------------


class PolicyAttachmentCreate(BaseSchema):
    policy_id: str = Field(min_length=1, max_length=100)


class CustomPolicyCreate(BaseSchema):
    """Payload for creating a member custom policy."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    statements: list[PolicyStatementSchema] = Field(min_length=1)
    resource_patterns: list[NonEmptyStr] = Field(default_factory=list)
    actions: list[NonEmptyStr] = Field(default_factory=list)
    conditions: dict[str, Any] | None = None


class CustomPolicyUpdate(BaseSchema):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    statements: list[PolicyStatementSchema] | None = Field(default=None, min_length=1)
    resource_patterns: list[NonEmptyStr] | None = None
    actions: list[NonEmptyStr] | None = None
    conditions: dict[str, Any] | None = None
    is_active: bool | None = None


class CustomPolicyOut(BaseSchema):
    id: str
    member_id: str
    name: str
    description: str | None = None
    statements: list[dict[str, Any]]
    resource_patterns: list[str]
    actions: list[str]
    conditions: dict[str, Any] | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MemberPoliciesOut(BaseSchema):
    """Everything that shapes one member's access."""

    member: WorkspaceMemberOut
    attached_policies: list[str]
    custom_policies: list[CustomPolicyOut]
    available_policies: list[WorkspacePolicyOut]
    managed_policies: list[ManagedPolicyOut]


class AccessDecisionOut(BaseSchema):
    """Explained access decision returned by the access-check endpoint."""

    member_id: str
    role: MemberRole
    action: str
    resource: str
    allowed: bool
    bypass: bool
    statement_count: int
    matched_allow: list[dict[str, Any]]
    matched_deny: list[dict[str, Any]]


__all__ = [
    "AccessDecisionOut",
    "CustomPolicyCreate",
    "CustomPolicyOut",
    "CustomPolicyUpdate",
    "MemberPoliciesOut",
    "PolicyAttachmentCreate",
    "PolicyStatementSchema",
    "WorkspacePolicyCreate",
    "WorkspacePolicyOut",
    "WorkspacePolicyUpdate",
]
