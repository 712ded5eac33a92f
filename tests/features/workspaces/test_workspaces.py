"""Integration tests for workspaces and membership."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient


def _headers(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


@pytest.mark.asyncio
async def test_create_workspace_makes_caller_owner(async_client: AsyncClient) -> None:
    user_id = f"founder-{uuid4().hex[:8]}"

    response = await async_client.post(
        "/api/v1/workspaces",
        json={"name": "Platform Docs", "description": "Internal API docs"},
        headers=_headers(user_id),
    )

    assert response.status_code == 201, response.text
    workspace = response.json()
    assert workspace["role"] == "OWNER"
    assert workspace["slug"].startswith("platform-docs")

    listing = await async_client.get("/api/v1/workspaces", headers=_headers(user_id))
    assert [entry["id"] for entry in listing.json()] == [workspace["id"]]


@pytest.mark.asyncio
async def test_explicit_slug_conflict(async_client: AsyncClient) -> None:
    slug = f"team-{uuid4().hex[:8]}"
    headers = _headers(f"slugger-{uuid4().hex[:8]}")

    first = await async_client.post(
        "/api/v1/workspaces", json={"name": "Team", "slug": slug}, headers=headers
    )
    second = await async_client.post(
        "/api/v1/workspaces", json={"name": "Team", "slug": slug}, headers=headers
    )

    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_workspace_visibility(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]

    as_viewer = await async_client.get(
        f"/api/v1/workspaces/{workspace_id}", headers=headers["viewer"]
    )
    assert as_viewer.status_code == 200
    assert as_viewer.json()["role"] == "VIEWER"

    outsider = await async_client.get(
        f"/api/v1/workspaces/{workspace_id}", headers=headers["outsider"]
    )
    assert outsider.status_code == 403

    anonymous = await async_client.get(f"/api/v1/workspaces/{workspace_id}")
    assert anonymous.status_code == 401

    missing = await async_client.get("/api/v1/workspaces/does-not-exist", headers=headers["owner"])
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_member_listing_uses_role_defaults(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]
    url = f"/api/v1/workspaces/{workspace_id}/members"

    as_member = await async_client.get(url, headers=headers["member"])
    assert as_member.status_code == 200
    assert len(as_member.json()) == 5

    as_viewer = await async_client.get(url, headers=headers["viewer"])
    assert as_viewer.status_code == 403
    detail = as_viewer.json()["detail"]
    assert detail["error"] == "forbidden"
    assert detail["action"] == "workspace:ViewMembers"


@pytest.mark.asyncio
async def test_inviting_members(async_client: AsyncClient, seed_workspace: dict[str, Any]) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]
    url = f"/api/v1/workspaces/{workspace_id}/members"

    denied = await async_client.post(
        url, json={"user_id": f"new-{uuid4().hex[:8]}"}, headers=headers["editor"]
    )
    assert denied.status_code == 403

    duplicate = await async_client.post(
        url, json={"user_id": seed_workspace["users"]["viewer"]}, headers=headers["admin"]
    )
    assert duplicate.status_code == 409

    owner_grant = await async_client.post(
        url,
        json={"user_id": f"co-owner-{uuid4().hex[:8]}", "role": "OWNER"},
        headers=headers["admin"],
    )
    assert owner_grant.status_code == 403

    added = await async_client.post(
        url, json={"user_id": f"new-{uuid4().hex[:8]}"}, headers=headers["admin"]
    )
    assert added.status_code == 201
    assert added.json()["role"] == "MEMBER"


@pytest.mark.asyncio
async def test_last_owner_is_protected(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]
    owner_member = seed_workspace["members"]["owner"]
    url = f"/api/v1/workspaces/{workspace_id}/members/{owner_member}"

    demote = await async_client.patch(url, json={"role": "ADMIN"}, headers=headers["owner"])
    assert demote.status_code == 409

    remove = await async_client.delete(url, headers=headers["owner"])
    assert remove.status_code == 409

    by_admin = await async_client.delete(url, headers=headers["admin"])
    assert by_admin.status_code == 403


@pytest.mark.asyncio
async def test_role_change_and_removal(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]
    viewer_member = seed_workspace["members"]["viewer"]
    url = f"/api/v1/workspaces/{workspace_id}/members/{viewer_member}"

    promoted = await async_client.patch(url, json={"role": "EDITOR"}, headers=headers["admin"])
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "EDITOR"

    by_member = await async_client.delete(url, headers=headers["member"])
    assert by_member.status_code == 403

    removed = await async_client.delete(url, headers=headers["admin"])
    assert removed.status_code == 204

    after = await async_client.get(
        f"/api/v1/workspaces/{workspace_id}", headers=headers["viewer"]
    )
    assert after.status_code == 403


@pytest.mark.asyncio
async def test_only_owner_deletes_workspace(
    async_client: AsyncClient, seed_workspace: dict[str, Any]
) -> None:
    workspace_id = seed_workspace["workspace"]["id"]
    headers = seed_workspace["headers"]
    url = f"/api/v1/workspaces/{workspace_id}"

    by_admin = await async_client.delete(url, headers=headers["admin"])
    assert by_admin.status_code == 403

    by_owner = await async_client.delete(url, headers=headers["owner"])
    assert by_owner.status_code == 204

    gone = await async_client.get(url, headers=headers["owner"])
    assert gone.status_code == 404
