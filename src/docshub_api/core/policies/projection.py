"""Translate boolean-flag workspace policies into policy statements."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .types import Effect, MemberRole, PolicyStatement

WORKSPACE_POLICY_FLAGS: Mapping[str, str] = MappingProxyType(
    {
        "can_create_documents": "documents:Create",
        "can_edit_documents": "documents:Update",
        "can_delete_documents": "documents:Delete",
        "can_publish_documents": "documents:Publish",
        "can_invite_members": "workspace:InviteMembers",
        "can_remove_members": "workspace:RemoveMembers",
        "can_manage_settings": "workspace:ManageSettings",
    }
)


def workspace_policy_to_statements(policy: Any) -> list[PolicyStatement]:
    """Return one ``Allow`` statement on ``*`` per enabled capability flag.

    ``policy`` may be an ORM row, a schema, or any object exposing the flag
    attributes. Disabled or missing flags contribute nothing; they never deny.
    """

    statements: list[PolicyStatement] = []
    for flag, action in WORKSPACE_POLICY_FLAGS.items():
        if getattr(policy, flag, False) is True:
            statements.append(
                PolicyStatement(effect=Effect.ALLOW, actions=(action,), resources=("*",))
            )
    return statements


def _role_values(roles: Iterable[Any] | None) -> set[str]:
    values: set[str] = set()
    for role in roles or ():
        values.add(role.value if isinstance(role, MemberRole) else str(role))
    return values


def policy_applies_to(policy: Any, role: MemberRole | str) -> bool:
    """Return whether an active workspace policy targets members with ``role``."""

    if not getattr(policy, "is_active", False):
        return False
    role_value = role.value if isinstance(role, MemberRole) else str(role)
    return role_value in _role_values(getattr(policy, "applies_to", None))


__all__ = [
    "WORKSPACE_POLICY_FLAGS",
    "policy_applies_to",
    "workspace_policy_to_statements",
]
