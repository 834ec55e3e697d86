"""Shared fixtures: throwaway SQLite databases and an app wired to them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from fruitstand.app import create_fruitstand_app
from fruitstand.fruits.tables import metadata
from fruitstand.infra.database import DatabaseManager, DatabaseSettings
from fruitstand.infra.migrations import upgrade

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator
    from pathlib import Path

    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "fruits.db"


@pytest.fixture()
def database_url(db_path: Path) -> str:
    """Async URL for the app and the repository."""
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture()
def sync_database_url(db_path: Path) -> str:
    """Sync URL (stdlib sqlite3) for inspecting the same file from tests."""
    return f"sqlite:///{db_path}"


@pytest.fixture()
def migrated_database_url(database_url: str) -> str:
    """Database upgraded to head with the real Alembic revisions."""
    upgrade(database_url)
    return database_url


@pytest.fixture()
def schema_database_url(database_url: str, sync_database_url: str) -> str:
    """Database with tables created from metadata, for async tests.

    Uses a sync engine so no event loop is started outside pytest-asyncio's.
    """
    engine = create_engine(sync_database_url)
    metadata.create_all(engine)
    engine.dispose()
    return database_url


@pytest_asyncio.fixture()
async def session(schema_database_url: str) -> AsyncIterator[AsyncSession]:
    manager = DatabaseManager(DatabaseSettings(url=schema_database_url))
    async with manager.session() as s:
        yield s
    await manager.dispose()


@pytest.fixture()
def fruitstand_app(migrated_database_url: str) -> FastAPI:
    """A fresh app pointed at a migrated, empty database."""
    manager = DatabaseManager(DatabaseSettings(url=migrated_database_url))
    return create_fruitstand_app(database_manager=manager)


@pytest.fixture()
def client(fruitstand_app: FastAPI) -> Iterator[TestClient]:
    """TestClient with lifespan hooks executed."""
    with TestClient(fruitstand_app, raise_server_exceptions=False) as c:
        yield c
