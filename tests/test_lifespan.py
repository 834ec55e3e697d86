"""Unit tests for lifespan composition."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from fruitstand.infra.lifespan import (
    LIFESPAN_PRIORITY_LOGGING,
    LIFESPAN_PRIORITY_PERSISTENCE,
    LifespanContribution,
    compose_lifespan,
    logging_contribution,
    persistence_contribution,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


def _recording_hook(name: str, events: list[str]) -> Any:
    @asynccontextmanager
    async def hook(app: Any) -> AsyncIterator[None]:
        events.append(f"start:{name}")
        yield
        events.append(f"stop:{name}")

    return hook


@pytest.mark.unit
class TestComposeLifespan:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_starts_by_priority_and_stops_in_reverse(self) -> None:
        events: list[str] = []
        lifespan = compose_lifespan(
            [
                LifespanContribution(hook=_recording_hook("late", events), priority=200),
                LifespanContribution(hook=_recording_hook("early", events), priority=10),
            ]
        )

        async with lifespan(MagicMock()):
            events.append("serving")

        assert events == ["start:early", "start:late", "serving", "stop:late", "stop:early"]

    @pytest.mark.asyncio(loop_scope="function")
    async def test_empty_hooks(self) -> None:
        async with compose_lifespan([])(MagicMock()):
            pass

    def test_builtin_priorities(self) -> None:
        assert logging_contribution.priority == LIFESPAN_PRIORITY_LOGGING
        assert persistence_contribution.priority == LIFESPAN_PRIORITY_PERSISTENCE
        assert LIFESPAN_PRIORITY_LOGGING < LIFESPAN_PRIORITY_PERSISTENCE


@pytest.mark.unit
class TestPersistenceLifespan:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_disposes_engine_on_shutdown(self) -> None:
        conn = AsyncMock()
        engine = MagicMock()
        engine.connect.return_value.__aenter__.return_value = conn
        app = MagicMock()
        app.state.database_manager.get_engine.return_value = engine
        app.state.database_manager.dispose = AsyncMock()

        async with persistence_contribution.hook(app):
            conn.execute.assert_awaited_once()
            app.state.database_manager.dispose.assert_not_awaited()

        app.state.database_manager.dispose.assert_awaited_once()
