"""Fruitstand application factory.

Usage::

    from fruitstand.app import create_fruitstand_app

    app = create_fruitstand_app()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fruitstand.fruits.router import router as fruits_router
from fruitstand.infra.app_factory import create_app
from fruitstand.infra.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import FastAPI

    from fruitstand.infra.database import DatabaseManager


def create_fruitstand_app(
    settings: AppSettings | None = None,
    *,
    database_manager: DatabaseManager | None = None,
    exclude_names: frozenset[str] = frozenset(),
) -> FastAPI:
    """Create the fruits API.

    Args:
        settings: Application settings; loaded from ``APP_*`` env vars when omitted.
        database_manager: Engine owner; the ``DATABASE_*`` singleton when omitted.
        exclude_names: Built-in lifespan hooks to skip.
    """
    return create_app(
        settings=settings,
        database_manager=database_manager,
        extra_routers=[fruits_router],
        exclude_names=exclude_names,
    )
