"""Alembic environment for the Worksite schema (async engine).

Invariants:
    - target_metadata is worksite.db.base.Base.metadata with every model imported
    - The URL comes from DATABASE_URL when set, normalized exactly like
      worksite.config.Settings; alembic.ini only serves local runs
"""

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from worksite.db.base import Base
import worksite.models  # noqa: F401

alembic_config = context.config
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)


def migration_url() -> str:
    env_url = os.environ.get("DATABASE_URL")
    if not env_url:
        return alembic_config.get_main_option("sqlalchemy.url")
    if env_url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + env_url[len("postgresql://"):]
    return env_url


def _configure_and_run(**options) -> None:
    context.configure(target_metadata=Base.metadata, **options)
    with context.begin_transaction():
        context.run_migrations()


async def _run_with_engine() -> None:
    section = alembic_config.get_section(alembic_config.config_ini_section, {})
    section["sqlalchemy.url"] = migration_url()
    engine = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(
            lambda sync_conn: _configure_and_run(connection=sync_conn),
        )
    await engine.dispose()


if context.is_offline_mode():
    # Emit SQL to stdout instead of connecting
    _configure_and_run(
        url=migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_with_engine())
