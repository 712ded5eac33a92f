"""Policy type definitions shared by the catalog, evaluator, and resolver."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any


class Effect(str, enum.Enum):
    """Outcome a statement contributes when it matches a request."""

    ALLOW = "Allow"
    DENY = "Deny"


class MemberRole(str, enum.Enum):
    """Workspace membership roles."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


ADMINISTRATIVE_ROLES: frozenset[MemberRole] = frozenset({MemberRole.OWNER, MemberRole.ADMIN})


def _string_tuple(value: Any, field: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValueError(f"'{field}' must be a list of strings")
    items = tuple(value)
    if not items:
        raise ValueError(f"'{field}' must not be empty")
    for item in items:
        if not isinstance(item, str) or not item:
            raise ValueError(f"'{field}' entries must be non-empty strings")
    return items


@dataclass(frozen=True, slots=True)
class PolicyStatement:
    """An Allow/Deny rule over a set of action and resource patterns.

    ``condition`` is carried through serialization but ignored by evaluation.
    """

    effect: Effect
    actions: tuple[str, ...]
    resources: tuple[str, ...]
    condition: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the statement using the wire keys (``Effect``, ``Action``, ...)."""

        payload: dict[str, Any] = {
            "Effect": self.effect.value,
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }
        if self.condition is not None:
            payload["Condition"] = dict(self.condition)
        return payload

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> PolicyStatement:
        """Parse a wire-format statement, raising ``ValueError`` when malformed."""

        if not isinstance(raw, Mapping):
            raise ValueError("Statement must be an object")
        try:
            effect = Effect(raw.get("Effect"))
        except ValueError as exc:
            raise ValueError("'Effect' must be 'Allow' or 'Deny'") from exc
        condition = raw.get("Condition")
        if condition is not None and not isinstance(condition, Mapping):
            raise ValueError("'Condition' must be an object when provided")
        return cls(
            effect=effect,
            actions=_string_tuple(raw.get("Action"), "Action"),
            resources=_string_tuple(raw.get("Resource"), "Resource"),
            condition=MappingProxyType(dict(condition)) if condition is not None else None,
        )


def create_policy_statement(
    effect: Effect | str,
    actions: Iterable[str],
    resources: Iterable[str],
    conditions: Mapping[str, Any] | None = None,
) -> PolicyStatement:
    """Build a statement from loose inputs; ``Condition`` is only set when given."""

    return PolicyStatement(
        effect=Effect(effect),
        actions=_string_tuple(list(actions), "Action"),
        resources=_string_tuple(list(resources), "Resource"),
        condition=MappingProxyType(dict(conditions)) if conditions else None,
    )


@dataclass(frozen=True, slots=True)
class ManagedPolicy:
    """Predefined, immutable bundle of statements referenced by id."""

    id: str
    name: str
    description: str
    statements: tuple[PolicyStatement, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "statements": [statement.to_dict() for statement in self.statements],
        }


@dataclass(frozen=True, slots=True)
class PolicyTemplate:
    """Example custom policy offered as a starting point in the UI."""

    name: str
    description: str
    statements: tuple[PolicyStatement, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "statements": [statement.to_dict() for statement in self.statements],
        }


__all__ = [
    "ADMINISTRATIVE_ROLES",
    "Effect",
    "ManagedPolicy",
    "MemberRole",
    "PolicyStatement",
    "PolicyTemplate",
    "create_policy_statement",
]
