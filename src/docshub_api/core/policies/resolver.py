"""Resolve the statements that apply to a workspace member and decide access.

OWNER and ADMIN members are allowed every action without evaluation. Every
other role is evaluated against the concatenation of:

* the role's default statements,
* active workspace policies whose ``applies_to`` lists the role,
* managed policies referenced from the member's ``attached_policies``,
* the member's active custom policies.

Order does not matter because a matching Deny from any source wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .catalog import get_managed_policy
from .evaluator import StatementLike, explain
from .projection import policy_applies_to, workspace_policy_to_statements
from .types import ADMINISTRATIVE_ROLES, Effect, MemberRole, PolicyStatement

logger = logging.getLogger(__name__)

ROLE_DEFAULT_STATEMENTS: Mapping[MemberRole, tuple[PolicyStatement, ...]] = MappingProxyType(
    {
        MemberRole.EDITOR: (
            PolicyStatement(
                effect=Effect.ALLOW,
                actions=(
                    "documents:Create",
                    "documents:Read",
                    "documents:Update",
                    "documents:Version",
                ),
                resources=("*",),
            ),
        ),
        MemberRole.MEMBER: (
            PolicyStatement(
                effect=Effect.ALLOW,
                actions=("documents:Read", "workspace:ViewMembers"),
                resources=("*",),
            ),
        ),
        MemberRole.VIEWER: (
            PolicyStatement(
                effect=Effect.ALLOW,
                actions=("documents:Read",),
                resources=("*",),
            ),
        ),
    }
)


@dataclass(frozen=True, slots=True)
class MemberPolicyContext:
    """Everything needed to decide what one member may do."""

    role: MemberRole
    workspace_policies: Sequence[Any] = ()
    attached_policy_ids: Sequence[str] = ()
    custom_policies: Sequence[Any] = ()


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """Explained access decision for a member, action, and resource."""

    action: str
    resource: str
    role: MemberRole
    allowed: bool
    bypass: bool = False
    statement_count: int = 0
    matched_allow: tuple[int, ...] = ()
    matched_deny: tuple[int, ...] = ()
    statements: tuple[StatementLike, ...] = field(default=(), repr=False)


def is_administrative(role: MemberRole | str) -> bool:
    try:
        return MemberRole(role) in ADMINISTRATIVE_ROLES
    except ValueError:
        return False


def collect_member_statements(context: MemberPolicyContext) -> list[StatementLike]:
    """Concatenate every statement source that applies to the member."""

    statements: list[StatementLike] = list(ROLE_DEFAULT_STATEMENTS.get(context.role, ()))

    for policy in context.workspace_policies:
        if policy_applies_to(policy, context.role):
            statements.extend(workspace_policy_to_statements(policy))

    for policy_id in context.attached_policy_ids:
        managed = get_managed_policy(policy_id)
        if managed is None:
            logger.warning(
                "policy.managed.unknown_attachment",
                extra={"policy_id": policy_id},
            )
            continue
        statements.extend(managed.statements)

    for custom in context.custom_policies:
        if not getattr(custom, "is_active", False):
            continue
        raw = getattr(custom, "statements", None)
        if isinstance(raw, (list, tuple)):
            statements.extend(raw)

    return statements


def describe_member_access(
    context: MemberPolicyContext,
    action: str,
    resource: str,
) -> AccessDecision:
    """Decide access and keep the evidence for callers that display it."""

    if is_administrative(context.role):
        return AccessDecision(
            action=action,
            resource=resource,
            role=context.role,
            allowed=True,
            bypass=True,
        )

    statements = collect_member_statements(context)
    result = explain(statements, action, resource)
    return AccessDecision(
        action=action,
        resource=resource,
        role=context.role,
        allowed=result.allowed,
        statement_count=len(statements),
        matched_allow=result.matched_allow,
        matched_deny=result.matched_deny,
        statements=tuple(statements),
    )


def is_member_allowed(context: MemberPolicyContext, action: str, resource: str) -> bool:
    """Return whether the member may perform ``action`` on ``resource``."""

    return describe_member_access(context, action, resource).allowed


__all__ = [
    "AccessDecision",
    "MemberPolicyContext",
    "ROLE_DEFAULT_STATEMENTS",
    "collect_member_statements",
    "describe_member_access",
    "is_administrative",
    "is_member_allowed",
]
