"""Alembic migration environment for the DocsHub schema."""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import Connection, create_engine, pool
from sqlalchemy.engine import make_url

import docshub_api.models  # noqa: F401  (registers tables on the metadata)
from docshub_api.db.base import metadata

config = context.config

# The API configures logging itself and sets configure_logger=False.
if config.config_file_name and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)

database_url = os.getenv("ALEMBIC_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
if not database_url:
    raise RuntimeError("Set sqlalchemy.url or ALEMBIC_DATABASE_URL before running migrations.")

# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table.
batch_mode = make_url(database_url).get_backend_name() == "sqlite"


def _migrate(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=metadata,
        render_as_batch=batch_mode,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    context.configure(
        url=database_url,
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=batch_mode,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    shared = config.attributes.get("connection")
    if shared is not None:
        _migrate(shared)
        return

    engine = create_engine(database_url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _migrate(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
