"""Workspace domain errors raised by the service layer."""

from __future__ import annotations


class WorkspaceNotFoundError(Exception):
    """Raised when a workspace lookup does not yield a result."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(f"Workspace {workspace_id!r} not found")
        self.workspace_id = workspace_id


class WorkspaceSlugConflictError(Exception):
    """Raised when a workspace slug is already taken."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Workspace slug {slug!r} already exists")
        self.slug = slug


class MemberNotFoundError(Exception):
    """Raised when a member does not exist in the workspace."""

    def __init__(self, member_id: str) -> None:
        super().__init__(f"Member {member_id!r} not found")
        self.member_id = member_id


class MemberAlreadyExistsError(Exception):
    """Raised when adding a user who already belongs to the workspace."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id!r} is already a member of this workspace")
        self.user_id = user_id


class LastOwnerError(Exception):
    """Raised when a change would leave a workspace without an owner."""

    def __init__(self) -> None:
        super().__init__("A workspace must keep at least one owner")


class OwnerRoleChangeError(Exception):
    """Raised when a non-owner tries to grant, change, or remove the OWNER role."""

    def __init__(self, message: str = "Only workspace owners can manage the OWNER role") -> None:
        super().__init__(message)


__all__ = [
    "LastOwnerError",
    "MemberAlreadyExistsError",
    "MemberNotFoundError",
    "OwnerRoleChangeError",
    "WorkspaceNotFoundError",
    "WorkspaceSlugConflictError",
]
