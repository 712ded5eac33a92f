"""HTTP translation of authentication and policy errors."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..auth.errors import AuthenticationError, PermissionDeniedError


def _unauthenticated(_request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(
        {"detail": str(exc) or "Authentication required"},
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


def _forbidden(_request: Request, exc: PermissionDeniedError) -> JSONResponse:
    """403 body naming the denied action and resource, without the matched statement."""

    return JSONResponse(
        {
            "detail": {
                "error": "forbidden",
                "action": exc.action,
                "resource": exc.resource,
                "workspace_id": exc.workspace_id,
            }
        },
        status_code=status.HTTP_403_FORBIDDEN,
    )


def register_auth_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthenticationError, _unauthenticated)
    app.add_exception_handler(PermissionDeniedError, _forbidden)
