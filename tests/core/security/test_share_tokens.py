"""Tests for HMAC-signed share-link tokens."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json

import pytest

from docshub_api.core.security import (
    SharePermissions,
    ShareTokenCodec,
    generate_share_url,
    get_expiry_label,
)

SECRET = "unit-test-secret-0123456789"
NOW_MS = 1_700_000_000_000
HOUR_MS = 3_600_000


class FakeClock:
    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def _b64url(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(payload_b64: str, secret: str = SECRET) -> str:
    digest = hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).digest()
    return _b64url(digest)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def codec(clock: FakeClock) -> ShareTokenCodec:
    return ShareTokenCodec(SECRET, clock=clock)


def test_token_layout_matches_wire_format(codec: ShareTokenCodec) -> None:
    token = codec.create_share_token("doc-1", "user-1")

    payload_b64, signature = token.split(".")
    assert "=" not in token
    assert _decode_segment(payload_b64).decode("utf-8") == (
        '{"documentId":"doc-1","userId":"user-1","expiresAt":1700086400000,'
        '"permissions":{"canView":true,"canEdit":false,"canDownload":true}}'
    )
    assert signature == _sign(payload_b64)


def test_verify_returns_payload(codec: ShareTokenCodec) -> None:
    permissions = SharePermissions(can_view=True, can_edit=True, can_download=False)
    token = codec.create_share_token("doc-9", "user-2", expiry_hours=2, permissions=permissions)

    payload = codec.verify_share_token(token)

    assert payload is not None
    assert payload.document_id == "doc-9"
    assert payload.user_id == "user-2"
    assert payload.expires_at == NOW_MS + 2 * HOUR_MS
    assert payload.permissions == permissions


def test_non_ascii_identifiers_are_kept_as_utf8(codec: ShareTokenCodec) -> None:
    token = codec.create_share_token("résumé", "Zoë")

    raw = _decode_segment(token.split(".")[0]).decode("utf-8")
    assert '"documentId":"résumé"' in raw
    payload = codec.verify_share_token(token)
    assert payload is not None and payload.user_id == "Zoë"


def test_expired_tokens_are_rejected(codec: ShareTokenCodec, clock: FakeClock) -> None:
    token = codec.create_share_token("doc-1", "user-1", expiry_hours=1)

    clock.now = NOW_MS + HOUR_MS
    assert codec.verify_share_token(token) is not None

    clock.now = NOW_MS + HOUR_MS + 1
    assert codec.verify_share_token(token) is None


def test_non_positive_expiry_produces_expired_token(
    codec: ShareTokenCodec, clock: FakeClock
) -> None:
    assert codec.verify_share_token(codec.create_share_token("d", "u", expiry_hours=-1)) is None

    token = codec.create_share_token("d", "u", expiry_hours=0)
    clock.now += 1
    assert codec.verify_share_token(token) is None


def test_wrong_secret_is_rejected(codec: ShareTokenCodec, clock: FakeClock) -> None:
    other = ShareTokenCodec("another-secret-0123456789", clock=clock)

    assert other.verify_share_token(codec.create_share_token("doc-1", "user-1")) is None


def test_tampered_payload_is_rejected(codec: ShareTokenCodec) -> None:
    token = codec.create_share_token("doc-1", "user-1")
    _, signature = token.split(".")
    forged = _b64url(
        json.dumps(
            {
                "documentId": "doc-1",
                "userId": "user-1",
                "expiresAt": NOW_MS + 1000 * HOUR_MS,
                "permissions": {"canView": True, "canEdit": True, "canDownload": True},
            },
            separators=(",", ":"),
        ).encode()
    )

    assert codec.verify_share_token(f"{forged}.{signature}") is None


def test_any_signature_character_flip_is_rejected(codec: ShareTokenCodec) -> None:
    payload_b64, signature = codec.create_share_token("doc-1", "user-1").split(".")

    for index, char in enumerate(signature):
        replacement = "A" if char != "A" else "B"
        flipped = signature[:index] + replacement + signature[index + 1 :]
        assert codec.verify_share_token(f"{payload_b64}.{flipped}") is None, index


@pytest.mark.parametrize(
    "token",
    [
        None,
        123,
        "",
        ".",
        "abc",
        "a.b.c",
        ".signature",
        "payload.",
        "pay load.sig",
        "payload.sig\n",
        "eyJ9.\ud800",
        "\ud800.signature",
        "p\u00e4yload.signature",
    ],
)
def test_malformed_tokens_are_rejected(codec: ShareTokenCodec, token: object) -> None:
    assert codec.verify_share_token(token) is None


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"[1, 2, 3]",
        b'{"documentId":"d","userId":"u","expiresAt":"soon",'
        b'"permissions":{"canView":true,"canEdit":false,"canDownload":true}}',
        b'{"documentId":"d","userId":"u","expiresAt":1800000000000}',
        b'{"documentId":"d","userId":"u","expiresAt":1800000000000,'
        b'"permissions":{"canView":"yes","canEdit":false,"canDownload":true}}',
    ],
)
def test_signed_but_invalid_payloads_are_rejected(
    codec: ShareTokenCodec, payload: bytes
) -> None:
    payload_b64 = _b64url(payload)

    assert codec.verify_share_token(f"{payload_b64}.{_sign(payload_b64)}") is None


def test_fractional_expiry_is_accepted(codec: ShareTokenCodec) -> None:
    payload_b64 = _b64url(
        b'{"documentId":"d","userId":"u","expiresAt":1800000000000.75,'
        b'"permissions":{"canView":true,"canEdit":false,"canDownload":false}}'
    )

    payload = codec.verify_share_token(f"{payload_b64}.{_sign(payload_b64)}")

    assert payload is not None
    assert payload.expires_at == 1_800_000_000_000
    assert payload.permissions.can_download is False


def test_codec_requires_secret_and_hides_it() -> None:
    with pytest.raises(ValueError):
        ShareTokenCodec("")

    assert SECRET not in repr(ShareTokenCodec(SECRET))


def test_generate_share_url_strips_trailing_slash() -> None:
    assert generate_share_url("tok", "https://docs.example.com/") == (
        "https://docs.example.com/share/tok"
    )
    assert generate_share_url("tok", "http://localhost:8000") == "http://localhost:8000/share/tok"


@pytest.mark.parametrize(
    ("hours", "label"),
    [(1, "1 hour"), (5, "5 hours"), (24, "1 day"), (36, "1 day"), (168, "7 days")],
)
def test_get_expiry_label(hours: float, label: str) -> None:
    assert get_expiry_label(hours) == label
