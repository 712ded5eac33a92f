"""Share-link domain exceptions."""

from __future__ import annotations


class ShareExpiryTooLongError(ValueError):
    """Raised when a share link would outlive the configured maximum."""

    def __init__(self, requested: float, maximum: float) -> None:
        super().__init__(
            f"expiry_hours must not exceed {maximum:g} (requested {requested:g})"
        )
        self.requested = requested
        self.maximum = maximum


class InvalidShareLinkError(Exception):
    """Raised when a share token fails verification for any reason."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired share link")


__all__ = ["InvalidShareLinkError", "ShareExpiryTooLongError"]
