"""API routes for the health module."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from docshub_api.core.http import SettingsDep

from .schemas import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Service health status",
    response_model_exclude_none=True,
)
async def read_health(settings: SettingsDep) -> HealthCheckResponse:
    """Return liveness information; no identity header required."""
    logger.debug("health.status", extra={"app_version": settings.app_version})
    return HealthCheckResponse(status="ok", version=settings.app_version)


__all__ = ["router"]
