"""Request-scoped middleware: correlation ids and access logging."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from .ids import generate_ulid
from .logging import bind_request_context, clear_request_context, log_context

logger = logging.getLogger("docshub_api.request")

REQUEST_ID_HEADER = "X-Request-ID"
_SHARE_PATH_PREFIX = "/api/v1/share/"


def _loggable_path(path: str) -> str:
    # Share tokens are bearer credentials and must not reach the logs.
    if path.startswith(_SHARE_PATH_PREFIX):
        return _SHARE_PATH_PREFIX + "{token}"
    return path


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id for the request and log one line when it finishes.

    The id comes from ``X-Request-ID`` when the caller sends one and is echoed
    back on the response.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(REQUEST_ID_HEADER) or generate_ulid()
        request.state.correlation_id = correlation_id
        bind_request_context(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error("request.error", extra=self._fields(request, started))
            raise
        else:
            logger.info(
                "request.complete",
                extra=self._fields(request, started, status_code=response.status_code),
            )
        finally:
            clear_request_context()

        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    @staticmethod
    def _fields(request: Request, started: float, **extra: object) -> dict[str, object]:
        return log_context(
            method=request.method,
            path=_loggable_path(request.url.path),
            duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
            **extra,
        )


def register_middleware(app: FastAPI) -> None:
    app.add_middleware(RequestContextMiddleware)


__all__ = ["REQUEST_ID_HEADER", "RequestContextMiddleware", "register_middleware"]
