"""Shared auth/permission error types."""


class AuthenticationError(Exception):
    """Raised when a request cannot be authenticated."""


class PermissionDeniedError(Exception):
    """Raised when a workspace member is not allowed to perform an action."""

    def __init__(
        self,
        action: str,
        *,
        resource: str | None = None,
        workspace_id: str | None = None,
    ) -> None:
        self.action = action
        self.resource = resource
        self.workspace_id = workspace_id
        msg = f"Action '{action}' denied"
        if resource:
            msg = f"{msg} on resource '{resource}'"
        super().__init__(msg)
