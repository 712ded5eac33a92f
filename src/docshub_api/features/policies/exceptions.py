"""Policy domain errors raised by the service layer."""

from __future__ import annotations


class WorkspacePolicyNotFoundError(Exception):
    """Raised when a workspace policy does not exist in the workspace."""

    def __init__(self, policy_id: str) -> None:
        super().__init__(f"Workspace policy {policy_id!r} not found")
        self.policy_id = policy_id


class CustomPolicyNotFoundError(Exception):
    """Raised when a member custom policy does not exist for the member."""

    def __init__(self, policy_id: str) -> None:
        super().__init__(f"Custom policy {policy_id!r} not found")
        self.policy_id = policy_id


class ManagedPolicyNotFoundError(Exception):
    """Raised when a managed policy id is not in the catalog."""

    def __init__(self, policy_id: str) -> None:
        super().__init__(f"Managed policy {policy_id!r} not found")
        self.policy_id = policy_id


__all__ = [
    "CustomPolicyNotFoundError",
    "ManagedPolicyNotFoundError",
    "WorkspacePolicyNotFoundError",
]
