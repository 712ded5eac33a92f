"""Workspace access-control policy engine."""

from .catalog import (
    ACTIONS,
    CUSTOM_POLICY_EXAMPLES,
    MANAGED_POLICIES,
    get_managed_policy,
    is_known_action,
    list_actions,
    list_custom_policy_examples,
    list_managed_policies,
)
from .evaluator import EvaluationResult, action_matches, evaluate, explain, resource_matches
from .projection import WORKSPACE_POLICY_FLAGS, policy_applies_to, workspace_policy_to_statements
from .resolver import (
    ROLE_DEFAULT_STATEMENTS,
    AccessDecision,
    MemberPolicyContext,
    collect_member_statements,
    describe_member_access,
    is_administrative,
    is_member_allowed,
)
from .types import (
    ADMINISTRATIVE_ROLES,
    Effect,
    ManagedPolicy,
    MemberRole,
    PolicyStatement,
    PolicyTemplate,
    create_policy_statement,
)

__all__ = [
    "ACTIONS",
    "ADMINISTRATIVE_ROLES",
    "AccessDecision",
    "CUSTOM_POLICY_EXAMPLES",
    "Effect",
    "EvaluationResult",
    "MANAGED_POLICIES",
    "ManagedPolicy",
    "MemberPolicyContext",
    "MemberRole",
    "PolicyStatement",
    "PolicyTemplate",
    "ROLE_DEFAULT_STATEMENTS",
    "WORKSPACE_POLICY_FLAGS",
    "action_matches",
    "collect_member_statements",
    "create_policy_statement",
    "describe_member_access",
    "evaluate",
    "explain",
    "get_managed_policy",
    "is_administrative",
    "is_known_action",
    "is_member_allowed",
    "list_actions",
    "list_custom_policy_examples",
    "list_managed_policies",
    "policy_applies_to",
    "resource_matches",
    "workspace_policy_to_statements",
]
