"""Allow/Deny evaluation over wildcard action and resource patterns.

Evaluation is a union of matching Allows minus any matching Deny: one matching
Deny statement suppresses every matching Allow regardless of order or source.
An empty statement list denies.

Statements may be :class:`PolicyStatement` instances or raw mappings using the
wire keys (``Effect``, ``Action``, ``Resource``) as stored in JSON columns. A
raw statement whose ``Action`` or ``Resource`` is missing or not a list matches
nothing, and an unrecognised ``Effect`` contributes neither Allow nor Deny.
Nothing in this module raises for malformed input.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeAlias

from .types import Effect, PolicyStatement

logger = logging.getLogger(__name__)

StatementLike: TypeAlias = PolicyStatement | Mapping[str, Any]

_WILDCARD = "*"
_DOMAIN_WILDCARD_SUFFIX = ":*"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Outcome of an evaluation plus the indices of the statements that matched."""

    allowed: bool
    matched_allow: tuple[int, ...] = ()
    matched_deny: tuple[int, ...] = ()

    @property
    def denied(self) -> bool:
        return bool(self.matched_deny)


@lru_cache(maxsize=1024)
def _compile_resource_pattern(pattern: str) -> re.Pattern[str]:
    # Only ``*`` is special; every other character matches literally.
    return re.compile(".*".join(re.escape(part) for part in pattern.split(_WILDCARD)))


def action_matches(pattern: str, action: str) -> bool:
    """Return whether an action pattern covers ``action``.

    ``*`` covers everything. ``domain:*`` covers any action that starts with
    ``domain`` (a plain prefix test, so ``documents:*`` also covers
    ``documentsArchive:Read``). Anything else must match exactly.
    """

    if not isinstance(pattern, str) or not isinstance(action, str):
        return False
    if pattern == _WILDCARD:
        return True
    if pattern.endswith(_DOMAIN_WILDCARD_SUFFIX):
        return action.startswith(pattern[: -len(_DOMAIN_WILDCARD_SUFFIX)])
    return pattern == action


def resource_matches(pattern: str, resource: str) -> bool:
    """Return whether a glob-style resource pattern fully matches ``resource``."""

    if not isinstance(pattern, str) or not isinstance(resource, str):
        return False
    if pattern == _WILDCARD:
        return True
    return _compile_resource_pattern(pattern).fullmatch(resource) is not None


def _pattern_list(value: Any) -> Sequence[Any] | None:
    if isinstance(value, (list, tuple)):
        return value
    return None


def _unpack(statement: Any) -> tuple[Effect | None, Sequence[Any], Sequence[Any]] | None:
    if isinstance(statement, PolicyStatement):
        return statement.effect, statement.actions, statement.resources
    if not isinstance(statement, Mapping):
        return None

    actions = _pattern_list(statement.get("Action"))
    resources = _pattern_list(statement.get("Resource"))
    if actions is None or resources is None:
        return None

    raw_effect = statement.get("Effect")
    effect: Effect | None
    try:
        effect = Effect(raw_effect)
    except (TypeError, ValueError):
        effect = None
    return effect, actions, resources


def explain(
    statements: Iterable[StatementLike] | None,
    action: str,
    resource: str,
) -> EvaluationResult:
    """Evaluate ``statements`` and report which of them matched."""

    matched_allow: list[int] = []
    matched_deny: list[int] = []

    for index, statement in enumerate(statements or ()):
        unpacked = _unpack(statement)
        if unpacked is None:
            logger.debug("policy.evaluate.statement_skipped", extra={"statement_index": index})
            continue
        effect, actions, resources = unpacked

        if not any(action_matches(entry, action) for entry in actions):
            continue
        if not any(resource_matches(entry, resource) for entry in resources):
            continue

        if effect is Effect.ALLOW:
            matched_allow.append(index)
        elif effect is Effect.DENY:
            matched_deny.append(index)

    return EvaluationResult(
        allowed=bool(matched_allow) and not matched_deny,
        matched_allow=tuple(matched_allow),
        matched_deny=tuple(matched_deny),
    )


def evaluate(
    statements: Iterable[StatementLike] | None,
    action: str,
    resource: str,
) -> bool:
    """Return ``True`` when some statement allows the request and none denies it."""

    return explain(statements, action, resource).allowed


__all__ = [
    "EvaluationResult",
    "StatementLike",
    "action_matches",
    "evaluate",
    "explain",
    "resource_matches",
]
