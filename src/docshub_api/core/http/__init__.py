"""HTTP-layer glue between FastAPI requests and the policy engine."""

from .dependencies import (
    PrincipalDep,
    SessionDep,
    SettingsDep,
    WorkspaceActor,
    get_app_settings,
    get_current_principal,
    require_workspace_action,
    require_workspace_member,
)
from .errors import register_auth_exception_handlers

__all__ = [
    "PrincipalDep",
    "SessionDep",
    "SettingsDep",
    "WorkspaceActor",
    "get_app_settings",
    "get_current_principal",
    "register_auth_exception_handlers",
    "require_workspace_action",
    "require_workspace_member",
]
