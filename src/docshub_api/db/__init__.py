"""Database primitives for the DocsHub API."""

from .base import NAMING_CONVENTION, Base, TimestampMixin, ULIDPrimaryKeyMixin, metadata, utc_now
from .engine import (
    ensure_database_ready,
    get_engine,
    render_sync_url,
    reset_bootstrap_state,
    reset_database_state,
)
from .session import get_db_session, get_sessionmaker, reset_session_state

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "TimestampMixin",
    "ULIDPrimaryKeyMixin",
    "ensure_database_ready",
    "get_db_session",
    "get_engine",
    "get_sessionmaker",
    "metadata",
    "render_sync_url",
    "reset_bootstrap_state",
    "reset_database_state",
    "reset_session_state",
    "utc_now",
]
