"""Alembic integration: async ``env.py`` support and programmatic commands.

The revision scripts live in the ``fruitstand.migrations`` package so they
ship with the wheel. ``upgrade``/``downgrade`` build an Alembic
:class:`~alembic.config.Config` pointing at that directory, so no
``alembic.ini`` is needed at runtime.

Usage::

    from fruitstand.infra.migrations import downgrade, upgrade

    upgrade()                       # DATABASE_* settings, to head
    downgrade("sqlite+aiosqlite:///fruits.db", revision="base")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command, context
from alembic.config import Config
from sqlalchemy.exc import SQLAlchemyError

import fruitstand.migrations
from fruitstand.foundation.exceptions import DataAccessError
from fruitstand.infra.database import DatabaseSettings

if TYPE_CHECKING:
    from sqlalchemy import MetaData
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(fruitstand.migrations.__file__).parent


def _do_run_migrations(connection: object, target_metadata: MetaData) -> None:
    """Run migrations within a synchronous connection context (via ``run_sync``)."""
    context.configure(
        connection=connection,  # type: ignore[arg-type]
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=connection.dialect.name == "sqlite",  # type: ignore[attr-defined]
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations(
    engine: AsyncEngine,
    target_metadata: MetaData,
) -> None:
    """Execute Alembic migrations on an async engine, then dispose it.

    Args:
        engine: SQLAlchemy ``AsyncEngine`` to use for migrations.
        target_metadata: Declarative metadata for autogenerate support.
    """
    async with engine.connect() as connection:
        await connection.run_sync(_do_run_migrations, target_metadata)
    await engine.dispose()


def alembic_config(url: str | None = None) -> Config:
    """Build an Alembic config for the bundled revision scripts.

    Args:
        url: Database URL. Defaults to ``DatabaseSettings().database_url``.
    """
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats '%' specially.
    resolved = url or DatabaseSettings().database_url
    config.set_main_option("sqlalchemy.url", resolved.replace("%", "%%"))
    return config


def upgrade(url: str | None = None, revision: str = "head") -> None:
    """Apply migrations up to ``revision``.

    Raises:
        DataAccessError: If the database rejects a migration or is unreachable.
    """
    logger.info("Upgrading database schema to %s", revision)
    try:
        command.upgrade(alembic_config(url), revision)
    except SQLAlchemyError as exc:
        raise DataAccessError("migrate", revision=revision) from exc


def downgrade(url: str | None = None, revision: str = "-1") -> None:
    """Roll migrations back to ``revision`` (one step by default).

    Raises:
        DataAccessError: If the database rejects a migration or is unreachable.
    """
    logger.info("Downgrading database schema to %s", revision)
    try:
        command.downgrade(alembic_config(url), revision)
    except SQLAlchemyError as exc:
        raise DataAccessError("rollback", revision=revision) from exc
