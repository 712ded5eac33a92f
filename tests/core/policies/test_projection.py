"""Tests for projecting boolean-flag workspace policies into statements."""

from __future__ import annotations

from types import SimpleNamespace

from docshub_api.core.policies import (
    MemberRole,
    evaluate,
    policy_applies_to,
    workspace_policy_to_statements,
)


def _policy(**overrides: object) -> SimpleNamespace:
    values: dict[str, object] = {
        "can_create_documents": True,
        "can_edit_documents": True,
        "can_delete_documents": False,
        "can_publish_documents": False,
        "can_invite_members": False,
        "can_remove_members": False,
        "can_manage_settings": False,
        "applies_to": ["MEMBER"],
        "is_active": True,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_default_flags_project_create_and_update() -> None:
    statements = workspace_policy_to_statements(_policy())

    assert [statement.actions for statement in statements] == [
        ("documents:Create",),
        ("documents:Update",),
    ]
    assert all(statement.resources == ("*",) for statement in statements)


def test_each_flag_maps_to_one_action() -> None:
    policy = _policy(
        can_create_documents=False,
        can_edit_documents=False,
        can_invite_members=True,
        can_manage_settings=True,
    )

    statements = workspace_policy_to_statements(policy)

    assert evaluate(statements, "workspace:InviteMembers", "ws-1") is True
    assert evaluate(statements, "workspace:ManageSettings", "ws-1") is True
    assert evaluate(statements, "documents:Create", "doc-1") is False


def test_only_true_flags_grant() -> None:
    policy = _policy(can_create_documents=1, can_edit_documents="yes")

    assert workspace_policy_to_statements(policy) == []


def test_disabled_flags_never_deny() -> None:
    statements = workspace_policy_to_statements(_policy(can_delete_documents=False))

    assert all(statement.effect.value == "Allow" for statement in statements)


def test_policy_applies_to_active_matching_roles() -> None:
    policy = _policy(applies_to=["MEMBER", "VIEWER"])

    assert policy_applies_to(policy, MemberRole.MEMBER) is True
    assert policy_applies_to(policy, "VIEWER") is True
    assert policy_applies_to(policy, MemberRole.EDITOR) is False
    assert policy_applies_to(_policy(is_active=False), MemberRole.MEMBER) is False
