"""Alembic environment for fruitstand.

Online migrations run on a throwaway async engine (``NullPool``); offline
mode renders SQL with literal binds.
"""

from __future__ import annotations

import asyncio

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from fruitstand.fruits.tables import metadata
from fruitstand.infra.database import DatabaseSettings
from fruitstand.infra.migrations import run_async_migrations

config = context.config
url = config.get_main_option("sqlalchemy.url") or DatabaseSettings().database_url


def run_migrations_offline() -> None:
    context.configure(
        url=url,
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_async_engine(url, poolclass=NullPool)
    asyncio.run(run_async_migrations(engine, metadata))


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
