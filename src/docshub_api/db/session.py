"""Per-request ``AsyncSession`` handling."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docshub_api.settings import Settings, get_settings

from .engine import engine_cache_key, get_engine

_factory: async_sessionmaker[AsyncSession] | None = None
_factory_key: tuple[Any, ...] | None = None


def reset_session_state() -> None:
    global _factory, _factory_key
    _factory, _factory_key = None, None


def get_sessionmaker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the current engine; rebuilt alongside it."""

    global _factory, _factory_key
    settings = settings or get_settings()
    key = engine_cache_key(settings)
    if _factory is None or _factory_key != key:
        _factory = async_sessionmaker(get_engine(settings), expire_on_commit=False, autoflush=False)
        _factory_key = key
    return _factory


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield one session per request: commit on success, roll back on error."""

    settings = getattr(request.app.state, "settings", None) or get_settings()
    async with get_sessionmaker(settings)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        if session.in_transaction():
            await session.commit()


__all__ = ["get_db_session", "get_sessionmaker", "reset_session_state"]
