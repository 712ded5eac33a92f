"""Tests for database bootstrap and connection configuration."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect, text

from docshub_api.db import ensure_database_ready, get_engine, render_sync_url
from docshub_api.settings import get_settings


def test_render_sync_url_strips_async_driver() -> None:
    assert render_sync_url("sqlite+aiosqlite:////tmp/docshub.sqlite") == (
        "sqlite:////tmp/docshub.sqlite"
    )


@pytest.mark.asyncio
async def test_migrations_create_schema() -> None:
    settings = get_settings()
    await ensure_database_ready(settings)
    engine = get_engine(settings)

    async with engine.connect() as connection:
        tables = await connection.run_sync(
            lambda sync_connection: set(inspect(sync_connection).get_table_names())
        )
        foreign_keys = (await connection.execute(text("PRAGMA foreign_keys"))).scalar_one()

    assert {
        "workspaces",
        "workspace_members",
        "workspace_policies",
        "member_custom_policies",
    } <= tables
    assert foreign_keys == 1
    await engine.dispose()
