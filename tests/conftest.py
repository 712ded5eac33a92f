"""Shared pytest fixtures for DocsHub API tests."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from docshub_api.db import reset_database_state
from docshub_api.main import create_app
from docshub_api.settings import reload_settings

TEST_HMAC_SECRET = "test-secret-for-share-links-0123456789"
IDENTITY_HEADER = "X-User-Id"

_ENV_VARS = (
    "DOCSHUB_DATABASE_DSN",
    "DOCSHUB_HMAC_SECRET",
    "DOCSHUB_SERVER_PUBLIC_URL",
)


@pytest.fixture(scope="session")
def _database_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a file-backed SQLite database URL for the test session."""

    db_path = tmp_path_factory.mktemp("docshub-db") / "docshub.sqlite"
    return f"sqlite+aiosqlite:///{db_path.as_posix()}"


@pytest.fixture(scope="session", autouse=True)
def _configure_environment(_database_url: str) -> Iterator[None]:
    """Point settings at the ephemeral database and a fixed signing secret."""

    os.environ["DOCSHUB_DATABASE_DSN"] = _database_url
    os.environ["DOCSHUB_HMAC_SECRET"] = TEST_HMAC_SECRET
    os.environ["DOCSHUB_SERVER_PUBLIC_URL"] = "https://docs.example.test"
    settings = reload_settings()
    assert settings.database_dsn == _database_url
    reset_database_state()

    yield

    reset_database_state()
    for env_var in _ENV_VARS:
        os.environ.pop(env_var, None)


@pytest_asyncio.fixture()
async def app() -> AsyncIterator[FastAPI]:
    """Return an application whose lifespan (migrations included) has run."""

    application = create_app(reload_settings())
    async with LifespanManager(application):
        yield application


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an HTTPX async client bound to the FastAPI app."""

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


def identity(user_id: str) -> dict[str, str]:
    return {IDENTITY_HEADER: user_id}


@pytest_asyncio.fixture()
async def seed_workspace(async_client: AsyncClient) -> dict[str, Any]:
    """Create a workspace with one member per role plus an outsider.

    Returns ``{"workspace": {...}, "users": {role: user_id}, "members":
    {role: member_id}, "headers": {role: headers}}`` keyed by lower-case role.
    """

    suffix = uuid4().hex[:8]
    roles = ("owner", "admin", "editor", "member", "viewer")
    users = {role: f"{role}-{suffix}" for role in roles}
    users["outsider"] = f"outsider-{suffix}"

    response = await async_client.post(
        "/api/v1/workspaces",
        json={"name": f"Acme {suffix}"},
        headers=identity(users["owner"]),
    )
    assert response.status_code == 201, response.text
    workspace = response.json()
    workspace_id = workspace["id"]

    for role in roles[1:]:
        added = await async_client.post(
            f"/api/v1/workspaces/{workspace_id}/members",
            json={"user_id": users[role], "role": role.upper()},
            headers=identity(users["owner"]),
        )
        assert added.status_code == 201, added.text

    listing = await async_client.get(
        f"/api/v1/workspaces/{workspace_id}/members",
        headers=identity(users["owner"]),
    )
    assert listing.status_code == 200, listing.text
    by_user = {entry["user_id"]: entry["id"] for entry in listing.json()}

    return {
        "workspace": workspace,
        "users": users,
        "members": {role: by_user[users[role]] for role in roles},
        "headers": {role: identity(user_id) for role, user_id in users.items()},
    }
