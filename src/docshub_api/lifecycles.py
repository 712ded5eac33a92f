"""FastAPI lifespan for the DocsHub application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import Lifespan

from docshub_api.common.logging import log_context
from docshub_api.core.security import get_share_token_codec
from docshub_api.db import ensure_database_ready, get_engine
from docshub_api.settings import Settings

logger = logging.getLogger(__name__)


def create_application_lifespan(*, settings: Settings) -> Lifespan[FastAPI]:
    """Return the lifespan context manager used by :func:`create_app`."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        await ensure_database_ready(settings)
        # Fail at startup rather than on the first share request.
        get_share_token_codec(settings)
        logger.info(
            "app.startup",
            extra=log_context(
                app_version=settings.app_version,
                identity_header=settings.identity_header,
            ),
        )
        try:
            yield
        finally:
            await get_engine(settings).dispose()
            logger.info("app.shutdown")

    return lifespan


__all__ = ["create_application_lifespan"]
