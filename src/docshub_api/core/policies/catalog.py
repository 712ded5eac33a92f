"""Static catalog of policy actions and managed policies.

The catalog is read-only data built at import time. Evaluation never consults
it: unknown actions are legal and simply match by string comparison.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .types import Effect, ManagedPolicy, PolicyStatement, PolicyTemplate

ACTIONS: Mapping[str, str] = MappingProxyType(
    {
        # Documents ------------------------------------------------------
        "documents:Create": "Create new documents",
        "documents:Read": "View documents",
        "documents:Update": "Edit documents",
        "documents:Delete": "Delete documents",
        "documents:Publish": "Publish documents",
        "documents:Version": "Manage document versions",
        # Workspace ------------------------------------------------------
        "workspace:InviteMembers": "Invite new members",
        "workspace:RemoveMembers": "Remove members",
        "workspace:ManageSettings": "Manage workspace settings",
        "workspace:ManagePolicies": "Manage policies",
        "workspace:ViewMembers": "View member list",
        # Policies -------------------------------------------------------
        "policies:Create": "Create policies",
        "policies:Update": "Update policies",
        "policies:Delete": "Delete policies",
        "policies:Attach": "Attach policies to members",
        "policies:Detach": "Detach policies from members",
    }
)


def _allow(*actions: str, resources: tuple[str, ...] = ("*",)) -> PolicyStatement:
    return PolicyStatement(effect=Effect.ALLOW, actions=actions, resources=resources)


def _deny(*actions: str, resources: tuple[str, ...]) -> PolicyStatement:
    return PolicyStatement(effect=Effect.DENY, actions=actions, resources=resources)


MANAGED_POLICIES: tuple[ManagedPolicy, ...] = (
    ManagedPolicy(
        id="admin-access",
        name="Administrator Access",
        description="Full access to all workspace resources",
        statements=(_allow("*"),),
    ),
    ManagedPolicy(
        id="power-user",
        name="Power User",
        description="Full access to documents but limited workspace management",
        statements=(_allow("documents:*", "workspace:ViewMembers"),),
    ),
    ManagedPolicy(
        id="read-only",
        name="Read Only Access",
        description="View-only access to all documents",
        statements=(_allow("documents:Read"),),
    ),
    ManagedPolicy(
        id="document-editor",
        name="Document Editor",
        description="Create and edit documents",
        statements=(
            _allow(
                "documents:Create",
                "documents:Read",
                "documents:Update",
                "documents:Version",
            ),
        ),
    ),
    ManagedPolicy(
        id="document-publisher",
        name="Document Publisher",
        description="Create, edit, and publish documents",
        statements=(
            _allow(
                "documents:Create",
                "documents:Read",
                "documents:Update",
                "documents:Publish",
                "documents:Version",
            ),
        ),
    ),
    ManagedPolicy(
        id="team-manager",
        name="Team Manager",
        description="Manage team members and view documents",
        statements=(
            _allow(
                "documents:Read",
                "workspace:InviteMembers",
                "workspace:RemoveMembers",
                "workspace:ViewMembers",
            ),
        ),
    ),
)

_MANAGED_BY_ID: Mapping[str, ManagedPolicy] = MappingProxyType(
    {policy.id: policy for policy in MANAGED_POLICIES}
)

_PRODUCTION_RESOURCES = ("*-prod", "*-production")

CUSTOM_POLICY_EXAMPLES: tuple[PolicyTemplate, ...] = (
    PolicyTemplate(
        name="API Doc V1 Editor",
        description="Edit only documents starting with api-doc-v1-",
        statements=(
            _allow("documents:Read", "documents:Update", resources=("api-doc-v1-*",)),
        ),
    ),
    PolicyTemplate(
        name="Production Publisher",
        description="Publish only production documents",
        statements=(
            _allow("documents:Read", "documents:Publish", resources=_PRODUCTION_RESOURCES),
        ),
    ),
    PolicyTemplate(
        name="Restricted Editor",
        description="Edit all except production documents",
        statements=(
            _allow("documents:Read", "documents:Update"),
            _deny("documents:Update", "documents:Delete", resources=_PRODUCTION_RESOURCES),
        ),
    ),
)


def list_actions() -> list[tuple[str, str]]:
    """Return ``(action, description)`` pairs in declaration order."""

    return list(ACTIONS.items())


def is_known_action(action: str) -> bool:
    return action in ACTIONS


def list_managed_policies() -> list[ManagedPolicy]:
    return list(MANAGED_POLICIES)


def get_managed_policy(policy_id: str) -> ManagedPolicy | None:
    """Return the managed policy with ``policy_id`` or ``None`` when unknown."""

    return _MANAGED_BY_ID.get(policy_id)


def list_custom_policy_examples() -> list[PolicyTemplate]:
    return list(CUSTOM_POLICY_EXAMPLES)


__all__ = [
    "ACTIONS",
    "CUSTOM_POLICY_EXAMPLES",
    "MANAGED_POLICIES",
    "get_managed_policy",
    "is_known_action",
    "list_actions",
    "list_custom_policy_examples",
    "list_managed_policies",
]
