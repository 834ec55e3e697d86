"""Lifespan composition and the built-in startup/shutdown hooks.

Hooks are :class:`LifespanContribution` instances ordered by priority. Lower
priorities start first and shut down last.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import text

from fruitstand.infra.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)

LIFESPAN_PRIORITY_LOGGING = 50
LIFESPAN_PRIORITY_PERSISTENCE = 75


@dataclass(frozen=True, slots=True)
class LifespanContribution:
    """A lifespan hook and its ordering priority.

    Attributes:
        hook: An async context manager factory ``(app) -> AsyncContextManager[None]``.
        priority: Lower priorities start first (and shut down last).
    """

    hook: Any
    priority: int = 500


def compose_lifespan(hooks: list[LifespanContribution]) -> object:
    """Create a FastAPI ``lifespan`` from ordered hooks.

    Args:
        hooks: LifespanContribution instances, in any order.

    Returns:
        An async context manager factory suitable for ``FastAPI(lifespan=...)``.
    """
    sorted_hooks = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for hook_contrib in sorted_hooks:
                logger.debug(
                    "Entering lifespan hook (priority=%d): %r",
                    hook_contrib.priority,
                    hook_contrib.hook,
                )
                await stack.enter_async_context(hook_contrib.hook(app))
            yield

    return lifespan


@asynccontextmanager
async def _logging_lifespan(app: Any) -> AsyncIterator[None]:
    configure_logging()
    yield


@asynccontextmanager
async def _persistence_lifespan(app: Any) -> AsyncIterator[None]:
    """Check connectivity on startup and dispose the engine on shutdown.

    Startup:
        Execute ``SELECT 1`` on the app's engine so a bad URL fails fast.

    Shutdown:
        Dispose the engine and its connection pool.
    """
    manager = app.state.database_manager

    engine = manager.get_engine()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("persistence_lifespan: database health check passed")

    try:
        yield
    finally:
        await manager.dispose()
        logger.info("persistence_lifespan: database engine disposed")


logging_contribution = LifespanContribution(
    hook=_logging_lifespan,
    priority=LIFESPAN_PRIORITY_LOGGING,
)

persistence_contribution = LifespanContribution(
    hook=_persistence_lifespan,
    priority=LIFESPAN_PRIORITY_PERSISTENCE,
)
