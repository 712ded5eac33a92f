"""Schemas for issuing and resolving share links."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from docshub_api.common.schema import BaseSchema


class SharePermissionsOut(BaseSchema):
    can_view: bool
    can_edit: bool
    can_download: bool


class ShareLinkCreate(BaseSchema):
    """Options for a new share link; view access is always granted."""

    expiry_hours: float | None = Field(default=None, gt=0)
    can_edit: bool = False
    can_download: bool = True


class ShareLinkOut(BaseSchema):
    token: str
    share_url: str
    expires_at: datetime
    expiry_hours: float
    expiry_label: str
    permissions: SharePermissionsOut


class SharedDocumentOut(BaseSchema):
    """What a valid share token grants."""

    document_id: str
    user_id: str
    permissions: SharePermissionsOut
    expires_at: datetime


__all__ = [
    "ShareLinkCreate",
    "ShareLinkOut",
    "SharePermissionsOut",
    "SharedDocumentOut",
]
