"""Compose the versioned API router."""

from __future__ import annotations

from fastapi import APIRouter

from docshub_api.features.catalog.router import router as catalog_router
from docshub_api.features.health.router import router as health_router
from docshub_api.features.policies.members_router import router as member_policies_router
from docshub_api.features.policies.router import router as workspace_policies_router
from docshub_api.features.sharing.router import router as sharing_router
from docshub_api.features.workspaces.members_router import router as members_router
from docshub_api.features.workspaces.router import router as workspaces_router

API_VERSION_PREFIX = "/v1"


def create_api_router() -> APIRouter:
    """Return the ``/v1`` router with every feature mounted."""

    api_router = APIRouter(prefix=API_VERSION_PREFIX)
    api_router.include_router(health_router, prefix="/health")
    api_router.include_router(catalog_router)
    api_router.include_router(workspaces_router)
    api_router.include_router(members_router)
    api_router.include_router(workspace_policies_router)
    api_router.include_router(member_policies_router)
    api_router.include_router(sharing_router)
    return api_router


__all__ = ["API_VERSION_PREFIX", "create_api_router"]
