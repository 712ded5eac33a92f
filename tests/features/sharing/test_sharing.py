"""Integration tests for issuing and resolving share links."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from httpx import AsyncClient

from docshub_api.core.security import SharePermissions, ShareTokenCodec


def _share_url(seed: dict[str, Any], document_id: str = "api-doc-v1-intro") -> str:
    return f"/api/v1/workspaces/{seed['workspace']['id']}/documents/{document_id}/share"


@pytest.mark.asyncio
async def test_share_round_trip(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    headers = seed_workspace["headers"]["viewer"]

    created = await async_client.post(
        _share_url(seed_workspace),
        json={"expiry_hours": 5, "can_edit": True},
        headers=headers,
    )

    assert created.status_code == 201, created.text
    link = created.json()
    assert link["share_url"] == f"https://docs.example.test/share/{link['token']}"
    assert link["expiry_hours"] == 5
    assert link["expiry_label"] == "5 hours"
    assert link["permissions"] == {"can_view": True, "can_edit": True, "can_download": True}
    expires_at = datetime.fromisoformat(link["expires_at"].replace("Z", "+00:00"))
    assert timedelta(hours=4) < expires_at - datetime.now(UTC) <= timedelta(hours=5)

    resolved = await async_client.get(f"/api/v1/share/{link['token']}")
    assert resolved.status_code == 200
    shared = resolved.json()
    assert shared["document_id"] == "api-doc-v1-intro"
    assert shared["user_id"] == seed_workspace["users"]["viewer"]
    assert shared["permissions"] == link["permissions"]


@pytest.mark.asyncio
async def test_share_defaults(async_client: AsyncClient, seed_workspace: dict[str, Any]) -> None:
    created = await async_client.post(
        _share_url(seed_workspace), headers=seed_workspace["headers"]["member"]
    )

    assert created.status_code == 201, created.text
    link = created.json()
    assert link["expiry_hours"] == 24
    assert link["expiry_label"] == "1 day"
    assert link["permissions"] == {"can_view": True, "can_edit": False, "can_download": True}


@pytest.mark.asyncio
async def test_share_expiry_is_bounded(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    headers = seed_workspace["headers"]["owner"]

    too_long = await async_client.post(
        _share_url(seed_workspace), json={"expiry_hours": 721}, headers=headers
    )
    assert too_long.status_code == 422

    non_positive = await async_client.post(
        _share_url(seed_workspace), json={"expiry_hours": 0}, headers=headers
    )
    assert non_positive.status_code == 422


@pytest.mark.asyncio
async def test_share_requires_document_read(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    headers = seed_workspace["headers"]
    owner = headers["owner"]
    viewer_member = seed_workspace["members"]["viewer"]
    workspace_id = seed_workspace["workspace"]["id"]

    await async_client.post(
        f"/api/v1/workspaces/{workspace_id}/members/{viewer_member}/policies/custom",
        json={
            "name": "No secrets",
            "statements": [
                {"Effect": "Deny", "Action": ["documents:Read"], "Resource": ["secret-*"]}
            ],
        },
        headers=owner,
    )

    denied = await async_client.post(
        _share_url(seed_workspace, "secret-roadmap"), headers=headers["viewer"]
    )
    assert denied.status_code == 403
    assert denied.json()["detail"]["resource"] == "secret-roadmap"

    allowed = await async_client.post(
        _share_url(seed_workspace, "public-roadmap"), headers=headers["viewer"]
    )
    assert allowed.status_code == 201

    outsider = await async_client.post(_share_url(seed_workspace), headers=headers["outsider"])
    assert outsider.status_code == 403


@pytest.mark.asyncio
async def test_invalid_share_links_are_indistinguishable(async_client: AsyncClient) -> None:
    foreign = ShareTokenCodec("some-other-secret-0123456789").create_share_token("doc", "user")
    expired = ShareTokenCodec("test-secret-for-share-links-0123456789").create_share_token(
        "doc", "user", expiry_hours=-1, permissions=SharePermissions()
    )

    for token in ("garbage", "a.b", foreign, expired):
        response = await async_client.get(f"/api/v1/share/{token}")
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or expired share link"}
