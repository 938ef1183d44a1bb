"""Alembic environment configuration (SQLite + PostgreSQL)."""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from boda_api.db.base import metadata
from boda_api.db.database import DatabaseConfig, build_sync_url
from boda_api.settings import get_settings

# Alembic Config object
config = context.config

# Keep Alembic logging optional (standard pattern)
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)


# Import models so Base.metadata is populated
def _import_models() -> None:
    import boda_api.models  # noqa: F401


_import_models()
target_metadata = metadata


def _get_url() -> str:
    # 1) alembic.ini / programmatic sqlalchemy.url
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url

    # 2) explicit override
    override = os.getenv("ALEMBIC_DATABASE_URL")
    if override:
        return override

    # 3) BODA_DATABASE_MIGRATIONS_URL / BODA_DATABASE_URL (converted to a sync driver)
    return build_sync_url(DatabaseConfig.from_settings(get_settings()))


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def run_migrations_offline() -> None:
    url = _get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _get_url()

    # If a connection is passed in (rare but useful), use it
    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        context.configure(
            connection=existing_connection,
            target_metadata=target_metadata,
            render_as_batch=_is_sqlite(url),
        )
        with context.begin_transaction():
            context.run_migrations()
        return

    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = url

    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    try:
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=_is_sqlite(url),
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
