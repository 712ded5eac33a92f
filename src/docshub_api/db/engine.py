"""Async engine cache and Alembic bootstrap.

The API talks to the database through one process-wide :class:`AsyncEngine`,
rebuilt whenever the DSN or echo flag changes. Schema changes are applied by
``alembic upgrade head`` at startup; each database URL is upgraded at most once
per process.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from sqlalchemy import event
from sqlalchemy.engine import URL, Connection, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from docshub_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_MS = 30_000

_engine: AsyncEngine | None = None
_engine_key: tuple[Any, ...] | None = None
_migrated: set[str] = set()
_migration_lock = asyncio.Lock()


def engine_cache_key(settings: Settings) -> tuple[Any, ...]:
    """Settings that force a new engine (and session factory) when they change."""

    return (settings.database_dsn, settings.database_echo)


def _sqlite_file(url: URL) -> Path | None:
    """Return the on-disk path of a SQLite URL, or ``None`` for in-memory databases."""

    database = (url.database or "").strip()
    if not database or database == ":memory:" or database.startswith("file:"):
        return None
    path = Path(database)
    return path if path.is_absolute() else Path.cwd() / path


def _is_sqlite_memory(url: URL) -> bool:
    database = (url.database or "").strip()
    if database.startswith("file:"):
        return dict(url.query or {}).get("mode") == "memory"
    return _sqlite_file(url) is None


def _enable_sqlite_pragmas(dbapi_connection: Any, _record: Any) -> None:
    # Members and custom policies cascade off their parents.
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
    finally:
        cursor.close()


def _build_engine(settings: Settings) -> AsyncEngine:
    url = make_url(settings.database_dsn)
    options: dict[str, Any] = {"echo": settings.database_echo, "pool_pre_ping": True}

    sqlite = url.get_backend_name() == "sqlite"
    if sqlite:
        options["poolclass"] = StaticPool
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": _SQLITE_BUSY_TIMEOUT_MS / 1000,
        }
        path = _sqlite_file(url)
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(url.render_as_string(hide_password=False), **options)
    if sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_pragmas)
    return engine


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Return the shared engine, rebuilding it when the database settings changed."""

    global _engine, _engine_key
    settings = settings or get_settings()
    key = engine_cache_key(settings)
    if _engine is not None and _engine_key == key:
        return _engine
    if _engine is not None:
        _engine.sync_engine.dispose()
    _engine = _build_engine(settings)
    _engine_key = key
    return _engine


def reset_database_state() -> None:
    """Drop the cached engine, session factory and migration bookkeeping."""

    global _engine, _engine_key
    if _engine is not None:
        _engine.sync_engine.dispose()
    _engine, _engine_key = None, None

    from . import session

    session.reset_session_state()
    reset_bootstrap_state()


def reset_bootstrap_state() -> None:
    _migrated.clear()


def render_sync_url(database: Settings | str) -> str:
    """Strip the async driver so Alembic can connect synchronously.

    ``sqlite+aiosqlite:///x.db`` becomes ``sqlite:///x.db``.
    """

    dsn = database.database_dsn if isinstance(database, Settings) else database
    url = make_url(dsn)
    return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)


def _alembic_config(settings: Settings, connection: Connection | None = None) -> Config:
    ini_path = settings.alembic_ini_path
    if not ini_path.exists():
        raise FileNotFoundError(f"Alembic configuration not found at {ini_path}")
    config = Config(str(ini_path))
    config.set_main_option("script_location", str(settings.alembic_migrations_dir))
    config.set_main_option("sqlalchemy.url", render_sync_url(settings))
    # env.py leaves the API's logging setup alone when this is False.
    config.attributes["configure_logger"] = False
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def _upgrade(settings: Settings, connection: Connection | None = None) -> None:
    command.upgrade(_alembic_config(settings, connection), "head")


async def ensure_database_ready(settings: Settings | None = None) -> None:
    """Upgrade the configured database to the latest migration.

    In-memory SQLite is migrated over the shared engine's own connection,
    otherwise the schema would vanish with Alembic's private connection.
    """

    settings = settings or get_settings()
    url = make_url(settings.database_dsn)
    target = render_sync_url(settings)

    async with _migration_lock:
        if target in _migrated:
            return
        if url.get_backend_name() == "sqlite" and _is_sqlite_memory(url):
            async with get_engine(settings).begin() as connection:
                await connection.run_sync(lambda sync_conn: _upgrade(settings, sync_conn))
        else:
            path = _sqlite_file(url) if url.get_backend_name() == "sqlite" else None
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(_upgrade, settings)
        _migrated.add(target)

    logger.info("database.migrations.applied", extra={"database": url.get_backend_name()})


__all__ = [
    "engine_cache_key",
    "ensure_database_ready",
    "get_engine",
    "render_sync_url",
    "reset_bootstrap_state",
    "reset_database_state",
]
