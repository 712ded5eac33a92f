"""Issue and resolve share links."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from docshub_api.common.logging import log_context
from docshub_api.core.security import (
    SharePermissions,
    ShareTokenCodec,
    ShareTokenPayload,
    generate_share_url,
    get_expiry_label,
    get_share_token_codec,
)
from docshub_api.settings import Settings

from .exceptions import InvalidShareLinkError, ShareExpiryTooLongError
from .schemas import ShareLinkCreate, ShareLinkOut, SharePermissionsOut, SharedDocumentOut

logger = logging.getLogger(__name__)


def _as_datetime(epoch_ms: int) -> datetime:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)


def _permissions_out(permissions: SharePermissions) -> SharePermissionsOut:
    return SharePermissionsOut(
        can_view=permissions.can_view,
        can_edit=permissions.can_edit,
        can_download=permissions.can_download,
    )


class ShareLinksService:
    """Sign share links with the configured secret and verify them later."""

    def __init__(self, *, settings: Settings, codec: ShareTokenCodec | None = None) -> None:
        self._settings = settings
        self._codec = codec or get_share_token_codec(settings)

    def create_link(
        self,
        *,
        workspace_id: str,
        document_id: str,
        user_id: str,
        payload: ShareLinkCreate,
    ) -> ShareLinkOut:
        expiry_hours = payload.expiry_hours or self._settings.share_token_default_expiry_hours
        if expiry_hours > self._settings.share_token_max_expiry_hours:
            raise ShareExpiryTooLongError(expiry_hours, self._settings.share_token_max_expiry_hours)

        permissions = SharePermissions(
            can_view=True,
            can_edit=payload.can_edit,
            can_download=payload.can_download,
        )
        token_payload = self._codec.build_payload(
            document_id,
            user_id,
            expiry_hours=expiry_hours,
            permissions=permissions,
        )
        token = self._codec.encode(token_payload)

        logger.info(
            "share.link.create",
            extra=log_context(
                workspace_id=workspace_id,
                document_id=document_id,
                user_id=user_id,
                expiry_hours=expiry_hours,
                can_edit=permissions.can_edit,
                can_download=permissions.can_download,
            ),
        )
        return ShareLinkOut(
            token=token,
            share_url=generate_share_url(token, self._settings.server_public_url),
            expires_at=_as_datetime(token_payload.expires_at),
            expiry_hours=expiry_hours,
            expiry_label=get_expiry_label(expiry_hours),
            permissions=_permissions_out(permissions),
        )

    def resolve(self, token: str) -> SharedDocumentOut:
        payload: ShareTokenPayload | None = self._codec.verify_share_token(token)
        if payload is None:
            raise InvalidShareLinkError()
        return SharedDocumentOut(
            document_id=payload.document_id,
            user_id=payload.user_id,
            permissions=_permissions_out(payload.permissions),
            expires_at=_as_datetime(payload.expires_at),
        )


__all__ = ["ShareLinksService"]
