"""ORM models registered on the shared metadata."""

from .policy import MemberCustomPolicy, WorkspacePolicy
from .workspace import Workspace, WorkspaceMember

__all__ = ["MemberCustomPolicy", "Workspace", "WorkspaceMember", "WorkspacePolicy"]
