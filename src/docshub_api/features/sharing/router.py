"""Share-link routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Security, status
from fastapi import Path as PathParam

from docshub_api.core.http import SettingsDep, WorkspaceActor, require_workspace_action

from .exceptions import InvalidShareLinkError, ShareExpiryTooLongError
from .schemas import ShareLinkCreate, ShareLinkOut, SharedDocumentOut
from .service import ShareLinksService

router = APIRouter(tags=["sharing"])


def get_share_links_service(settings: SettingsDep) -> ShareLinksService:
    return ShareLinksService(settings=settings)


share_service_dependency = Depends(get_share_links_service)
require_document_read = require_workspace_action("documents:Read", resource_param="document_id")

SHARE_LINK_CREATE_BODY = Body(default=None)

DocumentIdPath = Annotated[str, PathParam(min_length=1, description="Document identifier")]


@router.post(
    "/workspaces/{workspace_id}/documents/{document_id}/share",
    response_model=ShareLinkOut,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a signed share link for a document",
)
async def create_share_link(
    workspace_id: str,
    document_id: DocumentIdPath,
    actor: Annotated[WorkspaceActor, Security(require_document_read)],
    service: ShareLinksService = share_service_dependency,
    *,
    payload: ShareLinkCreate | None = SHARE_LINK_CREATE_BODY,
) -> ShareLinkOut:
    try:
        return service.create_link(
            workspace_id=workspace_id,
            document_id=document_id,
            user_id=actor.principal.user_id,
            payload=payload or ShareLinkCreate(),
        )
    except ShareExpiryTooLongError as exc:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.get(
    "/share/{token}",
    response_model=SharedDocumentOut,
    summary="Resolve a share link",
)
async def resolve_share_link(
    token: str,
    service: ShareLinksService = share_service_dependency,
) -> SharedDocumentOut:
    try:
        return service.resolve(token)
    except InvalidShareLinkError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


__all__ = ["router"]
