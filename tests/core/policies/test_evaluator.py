"""Tests for Allow/Deny statement evaluation."""

from __future__ import annotations

import pytest

from docshub_api.core.policies import (
    Effect,
    PolicyStatement,
    action_matches,
    evaluate,
    explain,
    resource_matches,
)


def _allow(actions: tuple[str, ...], resources: tuple[str, ...] = ("*",)) -> PolicyStatement:
    return PolicyStatement(effect=Effect.ALLOW, actions=actions, resources=resources)


def _deny(actions: tuple[str, ...], resources: tuple[str, ...] = ("*",)) -> PolicyStatement:
    return PolicyStatement(effect=Effect.DENY, actions=actions, resources=resources)


def test_empty_statements_deny() -> None:
    assert evaluate([], "documents:Read", "doc-1") is False
    assert evaluate(None, "documents:Read", "doc-1") is False


def test_exact_action_allow() -> None:
    statements = [_allow(("documents:Read",))]

    assert evaluate(statements, "documents:Read", "doc-1") is True
    assert evaluate(statements, "documents:Update", "doc-1") is False


def test_deny_overrides_allow_in_any_order() -> None:
    allow = _allow(("documents:*",))
    deny = _deny(("documents:Delete",))

    assert evaluate([allow, deny], "documents:Delete", "doc-1") is False
    assert evaluate([deny, allow], "documents:Delete", "doc-1") is False
    assert evaluate([deny, allow], "documents:Read", "doc-1") is True


@pytest.mark.parametrize("deny_first", [False, True])
def test_production_document_carved_out_of_versioned_allow(deny_first: bool) -> None:
    allow = _allow(("documents:Read", "documents:Update"), ("api-doc-v1-*",))
    deny = _deny(("documents:Update",), ("api-doc-v1-prod",))
    statements = [deny, allow] if deny_first else [allow, deny]

    assert evaluate(statements, "documents:Update", "api-doc-v1-prod") is False
    assert evaluate(statements, "documents:Update", "api-doc-v1-staging") is True
    assert evaluate(statements, "documents:Read", "api-doc-v1-prod") is True
    assert evaluate(statements, "documents:Update", "api-doc-v2-staging") is False


def test_deny_alone_is_not_an_allow() -> None:
    assert evaluate([_deny(("documents:Read",))], "documents:Update", "doc-1") is False


@pytest.mark.parametrize(
    ("pattern", "action", "expected"),
    [
        ("*", "workspace:ManagePolicies", True),
        ("documents:*", "documents:Publish", True),
        ("documents:*", "workspace:ViewMembers", False),
        # The domain wildcard is a plain prefix test.
        ("documents:*", "documentsArchive:Read", True),
        ("documents:Read", "documents:Read", True),
        ("documents:Read", "documents:read", False),
        ("documents:Re*", "documents:Read", False),
    ],
)
def test_action_matches(pattern: str, action: str, expected: bool) -> None:
    assert action_matches(pattern, action) is expected


@pytest.mark.parametrize(
    ("pattern", "resource", "expected"),
    [
        ("*", "anything-at-all", True),
        ("api-doc-v1-*", "api-doc-v1-intro", True),
        ("api-doc-v1-*", "api-doc-v2-intro", False),
        ("*-prod", "billing-prod", True),
        ("*-prod", "billing-prod-copy", False),
        ("a*b*c", "aXXbYYc", True),
        ("a*b*c", "aXXbYY", False),
        ("report.pdf", "reportXpdf", False),
        ("report.pdf", "report.pdf", True),
        ("(draft)+", "(draft)+", True),
        ("doc-1", "doc-10", False),
    ],
)
def test_resource_matches(pattern: str, resource: str, expected: bool) -> None:
    assert resource_matches(pattern, resource) is expected


def test_resource_scoping() -> None:
    statements = [_allow(("documents:Update",), ("api-doc-v1-*",))]

    assert evaluate(statements, "documents:Update", "api-doc-v1-auth") is True
    assert evaluate(statements, "documents:Update", "api-doc-v2-auth") is False


def test_raw_mapping_statements_are_evaluated() -> None:
    statements = [
        {"Effect": "Allow", "Action": ["documents:Read", "documents:Update"], "Resource": ["*"]},
        {"Effect": "Deny", "Action": ["documents:Update"], "Resource": ["*-prod"]},
    ]

    assert evaluate(statements, "documents:Update", "guide") is True
    assert evaluate(statements, "documents:Update", "guide-prod") is False
    assert evaluate(statements, "documents:Read", "guide-prod") is True


def test_malformed_statements_are_skipped() -> None:
    statements = [
        {"Effect": "Allow", "Action": "documents:Read", "Resource": ["*"]},
        {"Effect": "Allow", "Action": ["documents:Read"]},
        {"Effect": "Maybe", "Action": ["*"], "Resource": ["*"]},
        42,
        None,
    ]

    assert evaluate(statements, "documents:Read", "doc-1") is False


def test_unknown_effect_does_not_deny() -> None:
    statements = [
        {"Effect": "Allow", "Action": ["*"], "Resource": ["*"]},
        {"Effect": "deny", "Action": ["*"], "Resource": ["*"]},
    ]

    assert evaluate(statements, "documents:Delete", "doc-1") is True


def test_explain_reports_matching_indices() -> None:
    statements = [
        _allow(("documents:Read",)),
        _allow(("workspace:ViewMembers",)),
        _allow(("documents:*",)),
        _deny(("documents:Read",), ("secret-*",)),
    ]

    granted = explain(statements, "documents:Read", "guide")
    assert granted.allowed is True
    assert granted.matched_allow == (0, 2)
    assert granted.matched_deny == ()
    assert granted.denied is False

    refused = explain(statements, "documents:Read", "secret-plan")
    assert refused.allowed is False
    assert refused.matched_allow == (0, 2)
    assert refused.matched_deny == (3,)
    assert refused.denied is True


def test_conditions_are_ignored() -> None:
    statement = PolicyStatement(
        effect=Effect.ALLOW,
        actions=("documents:Read",),
        resources=("*",),
        condition={"IpAddress": {"aws:SourceIp": "10.0.0.0/8"}},
    )

    assert evaluate([statement], "documents:Read", "doc-1") is True
