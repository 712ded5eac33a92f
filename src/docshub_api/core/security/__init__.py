"""Signing helpers for capability tokens."""

from .share_tokens import (
    SharePermissions,
    ShareTokenCodec,
    ShareTokenPayload,
    generate_share_url,
    get_expiry_label,
    get_share_token_codec,
)

__all__ = [
    "SharePermissions",
    "ShareTokenCodec",
    "ShareTokenPayload",
    "generate_share_url",
    "get_expiry_label",
    "get_share_token_codec",
]
