"""Tests for policy statement value types."""

from __future__ import annotations

import pytest

from docshub_api.core.policies import (
    Effect,
    MemberRole,
    PolicyStatement,
    create_policy_statement,
)
from docshub_api.core.policies.types import ADMINISTRATIVE_ROLES


def test_to_dict_uses_wire_keys_and_omits_missing_condition() -> None:
    statement = create_policy_statement("Allow", ["documents:Read"], ["api-*"])

    assert statement.to_dict() == {
        "Effect": "Allow",
        "Action": ["documents:Read"],
        "Resource": ["api-*"],
    }


def test_condition_is_serialized_when_present() -> None:
    statement = create_policy_statement(
        Effect.DENY,
        ["documents:Delete"],
        ["*"],
        {"Bool": {"mfa": "false"}},
    )

    payload = statement.to_dict()
    assert payload["Effect"] == "Deny"
    assert payload["Condition"] == {"Bool": {"mfa": "false"}}


def test_from_dict_parses_wire_statement() -> None:
    statement = PolicyStatement.from_dict(
        {"Effect": "Deny", "Action": ["documents:Update"], "Resource": ["*-prod"]}
    )

    assert statement.effect is Effect.DENY
    assert statement.actions == ("documents:Update",)
    assert statement.resources == ("*-prod",)
    assert statement.condition is None


@pytest.mark.parametrize(
    "raw",
    [
        {"Effect": "Permit", "Action": ["*"], "Resource": ["*"]},
        {"Effect": "Allow", "Action": "documents:Read", "Resource": ["*"]},
        {"Effect": "Allow", "Action": [], "Resource": ["*"]},
        {"Effect": "Allow", "Action": ["documents:Read"], "Resource": [""]},
        {"Effect": "Allow", "Action": ["*"], "Resource": ["*"], "Condition": "yes"},
    ],
)
def test_from_dict_rejects_malformed_statements(raw: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        PolicyStatement.from_dict(raw)


def test_administrative_roles() -> None:
    assert ADMINISTRATIVE_ROLES == frozenset({MemberRole.OWNER, MemberRole.ADMIN})
    assert MemberRole("VIEWER") is MemberRole.VIEWER
