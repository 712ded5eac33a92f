"""DocsHub FastAPI application entry point."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from .common.exceptions import register_exception_handlers
from .common.logging import setup_logging
from .common.middleware import register_middleware
from .core.http.errors import register_auth_exception_handlers
from .lifecycles import create_application_lifespan
from .routers import create_api_router
from .settings import Settings, get_settings

API_PREFIX = "/api"
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the DocsHub FastAPI application."""
    # Settings + logging first so everything else uses the configured root logger.
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url if settings.api_docs_enabled else None,
        redoc_url=settings.redoc_url if settings.api_docs_enabled else None,
        openapi_url=settings.openapi_url if settings.api_docs_enabled else None,
        debug=settings.debug,
        lifespan=create_application_lifespan(settings=settings),
    )
    app.state.settings = settings

    register_exception_handlers(app)
    register_auth_exception_handlers(app)
    register_middleware(app)
    app.include_router(create_api_router(), prefix=API_PREFIX)

    if settings.api_docs_enabled:
        logger.info(
            "api.docs.enabled",
            extra={"swagger_url": settings.docs_url, "openapi_url": settings.openapi_url},
        )
    return app


def start() -> None:
    """Run the API with uvicorn using the configured host and port."""

    settings = get_settings()
    uvicorn.run(
        "docshub_api.asgi:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


__all__ = ["API_PREFIX", "create_app", "start"]
