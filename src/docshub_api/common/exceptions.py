"""JSON error responses for exceptions that escape route handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from docshub_api.common.logging import log_context

logger = logging.getLogger("docshub_api.errors")


def _request_fields(request: Request) -> dict[str, str]:
    return {"method": request.method, "path": request.url.path}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render ``HTTPException`` as ``{"detail": ...}``; only 5xx are logged."""

    if exc.status_code >= 500:
        logger.error(
            "http.server_error",
            extra=log_context(**_request_fields(request), status_code=exc.status_code),
        )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "http.unhandled",
        extra=log_context(**_request_fields(request), exception_type=type(exc).__name__),
    )
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "http_exception_handler",
    "register_exception_handlers",
    "unhandled_exception_handler",
]
