"""Identity primitives for requests authenticated upstream."""

from .errors import AuthenticationError, PermissionDeniedError
from .principal import AuthenticatedPrincipal, principal_from_request

__all__ = [
    "AuthenticatedPrincipal",
    "AuthenticationError",
    "PermissionDeniedError",
    "principal_from_request",
]
