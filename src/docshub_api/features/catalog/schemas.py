"""Schemas for the policy catalog."""

from __future__ import annotations

from typing import Any

from docshub_api.common.schema import BaseSchema
from docshub_api.core.policies import ManagedPolicy, PolicyTemplate


class ActionOut(BaseSchema):
    action: str
    description: str


class ManagedPolicyOut(BaseSchema):
    """Managed policy with statements in wire format."""

    id: str
    name: str
    description: str
    statements: list[dict[str, Any]]

    @classmethod
    def from_policy(cls, policy: ManagedPolicy) -> ManagedPolicyOut:
        return cls.model_validate(policy.to_dict())


class PolicyTemplateOut(BaseSchema):
    name: str
    description: str
    statements: list[dict[str, Any]]

    @classmethod
    def from_template(cls, template: PolicyTemplate) -> PolicyTemplateOut:
        return cls.model_validate(template.to_dict())


__all__ = ["ActionOut", "ManagedPolicyOut", "PolicyTemplateOut"]
