"""Lightweight identity representation for requests.

DocsHub does not manage sessions itself. An upstream identity provider
authenticates the caller and forwards the user id in a trusted header
(``Settings.identity_header``, ``X-User-Id`` by default).
"""

from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request

from .errors import AuthenticationError

MAX_USER_ID_LENGTH = 255


@dataclass(slots=True, frozen=True)
class AuthenticatedPrincipal:
    """Identity information available to downstream handlers."""

    user_id: str


def principal_from_request(request: Request, header_name: str) -> AuthenticatedPrincipal:
    """Build a principal from the trusted identity header or raise."""

    raw = (request.headers.get(header_name) or "").strip()
    if not raw:
        raise AuthenticationError("Authentication required")
    if len(raw) > MAX_USER_ID_LENGTH:
        raise AuthenticationError("Invalid identity header")
    return AuthenticatedPrincipal(user_id=raw)
