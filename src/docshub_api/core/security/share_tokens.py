"""HMAC-signed, expiring share-link tokens.

Token layout::

    base64url(payload_json) + "." + base64url(HMAC-SHA256(secret, payload_b64))

Both segments are unpadded base64url. The payload is compact JSON with the keys
``documentId``, ``userId``, ``expiresAt`` (epoch milliseconds) and
``permissions`` (``canView``, ``canEdit``, ``canDownload``) in that order, so
links issued by earlier deployments keep verifying.

Verification never raises. Every failure (bad shape, bad signature, bad
encoding, expiry) yields ``None`` so callers cannot tell them apart.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import math
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from docshub_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)

MILLISECONDS_PER_HOUR = 60 * 60 * 1000
DEFAULT_EXPIRY_HOURS = 24

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]+")

Clock = Callable[[], int]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True, slots=True)
class SharePermissions:
    """Capabilities granted to whoever holds the link."""

    can_view: bool = True
    can_edit: bool = False
    can_download: bool = True

    def to_wire(self) -> dict[str, bool]:
        return {
            "canView": self.can_view,
            "canEdit": self.can_edit,
            "canDownload": self.can_download,
        }


@dataclass(frozen=True, slots=True)
class ShareTokenPayload:
    """Decoded contents of a share token."""

    document_id: str
    user_id: str
    expires_at: int
    permissions: SharePermissions = field(default_factory=SharePermissions)

    def to_wire(self) -> dict[str, Any]:
        return {
            "documentId": self.document_id,
            "userId": self.user_id,
            "expiresAt": self.expires_at,
            "permissions": self.permissions.to_wire(),
        }


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    if not _SEGMENT_RE.fullmatch(segment):
        raise ValueError("segment is not base64url")
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


def _parse_payload(raw: Any) -> ShareTokenPayload | None:
    if not isinstance(raw, dict):
        return None

    document_id = raw.get("documentId")
    user_id = raw.get("userId")
    expires_at = raw.get("expiresAt")
    permissions = raw.get("permissions")

    if not isinstance(document_id, str) or not isinstance(user_id, str):
        return None
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        return None
    if isinstance(expires_at, float) and not math.isfinite(expires_at):
        return None
    if not isinstance(permissions, dict):
        return None

    flags = (
        permissions.get("canView"),
        permissions.get("canEdit"),
        permissions.get("canDownload"),
    )
    if not all(isinstance(flag, bool) for flag in flags):
        return None

    return ShareTokenPayload(
        document_id=document_id,
        user_id=user_id,
        expires_at=math.floor(expires_at),
        permissions=SharePermissions(
            can_view=flags[0],
            can_edit=flags[1],
            can_download=flags[2],
        ),
    )


class ShareTokenCodec:
    """Create and verify share tokens with one process-wide secret.

    Rotating the secret invalidates every outstanding link.
    """

    def __init__(self, secret: str, *, clock: Clock | None = None) -> None:
        if not isinstance(secret, str) or not secret:
            raise ValueError("Share token secret must be a non-empty string")
        self._key = secret.encode("utf-8")
        self._clock: Clock = clock or _now_ms

    def __repr__(self) -> str:
        return f"{type(self).__name__}(secret=***)"

    def _sign(self, payload_b64: str) -> str:
        digest = hmac.new(self._key, payload_b64.encode("ascii"), hashlib.sha256).digest()
        return _b64url_encode(digest)

    def build_payload(
        self,
        document_id: str,
        user_id: str,
        expiry_hours: float = DEFAULT_EXPIRY_HOURS,
        permissions: SharePermissions | None = None,
    ) -> ShareTokenPayload:
        """Return the payload a token issued now would carry."""

        return ShareTokenPayload(
            document_id=document_id,
            user_id=user_id,
            expires_at=self._clock() + int(expiry_hours * MILLISECONDS_PER_HOUR),
            permissions=permissions or SharePermissions(),
        )

    def encode(self, payload: ShareTokenPayload) -> str:
        """Serialize and sign ``payload``."""

        payload_json = json.dumps(payload.to_wire(), separators=(",", ":"), ensure_ascii=False)
        payload_b64 = _b64url_encode(payload_json.encode("utf-8"))
        return f"{payload_b64}.{self._sign(payload_b64)}"

    def create_share_token(
        self,
        document_id: str,
        user_id: str,
        expiry_hours: float = DEFAULT_EXPIRY_HOURS,
        permissions: SharePermissions | None = None,
    ) -> str:
        """Return a signed token for ``document_id``.

        Zero or negative ``expiry_hours`` produce a token that is already
        expired.
        """

        return self.encode(
            self.build_payload(document_id, user_id, expiry_hours, permissions)
        )

    def verify_share_token(self, token: Any) -> ShareTokenPayload | None:
        """Return the payload of a valid, unexpired token, otherwise ``None``."""

        if not isinstance(token, str):
            return None

        parts = token.split(".")
        # Both segments must be base64url before anything is encoded or compared.
        if len(parts) != 2 or not all(_SEGMENT_RE.fullmatch(part) for part in parts):
            logger.debug("share.verify.rejected", extra={"reason": "malformed"})
            return None
        payload_b64, signature = parts

        expected = self._sign(payload_b64)
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii")):
            logger.debug("share.verify.rejected", extra={"reason": "signature"})
            return None

        try:
            raw = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
        except (binascii.Error, ValueError, UnicodeDecodeError, RecursionError):
            logger.debug("share.verify.rejected", extra={"reason": "payload"})
            return None

        payload = _parse_payload(raw)
        if payload is None:
            logger.debug("share.verify.rejected", extra={"reason": "payload"})
            return None

        if self._clock() > raw["expiresAt"]:
            logger.debug(
                "share.verify.rejected",
                extra={"reason": "expired", "document_id": payload.document_id},
            )
            return None
        return payload


def generate_share_url(token: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/share/{token}"


def _format_count(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def get_expiry_label(hours: float) -> str:
    """Render an expiry window as ``"5 hours"`` or ``"7 days"``."""

    if hours < 24:
        return f"{_format_count(hours)} hour{'s' if hours > 1 else ''}"
    days = math.floor(hours / 24)
    return f"{days} day{'s' if days > 1 else ''}"


@lru_cache(maxsize=4)
def _codec_for_secret(secret: str) -> ShareTokenCodec:
    return ShareTokenCodec(secret)


def get_share_token_codec(settings: Settings | None = None) -> ShareTokenCodec:
    """Return the codec bound to the configured ``hmac_secret``."""

    resolved = settings or get_settings()
    return _codec_for_secret(resolved.hmac_secret_value)


__all__ = [
    "DEFAULT_EXPIRY_HOURS",
    "SharePermissions",
    "ShareTokenCodec",
    "ShareTokenPayload",
    "generate_share_url",
    "get_expiry_label",
    "get_share_token_codec",
]
