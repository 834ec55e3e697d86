"""Health check endpoint reporting database connectivity."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fruitstand.infra.database import DatabaseManager, get_database_manager

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


async def _check_database(manager: DatabaseManager) -> dict[str, str]:
    """Check database connectivity via SELECT 1."""
    try:
        engine = manager.get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ok"}
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("health_check: database unhealthy: %s", exc)
        return {"status": "error", "detail": type(exc).__name__}


@router.get("/healthz")
async def healthz(request: Request) -> Any:
    """Return 200 when the database answers, 503 otherwise."""
    manager = getattr(request.app.state, "database_manager", None) or get_database_manager()
    checks: dict[str, dict[str, str]] = {"database": await _check_database(manager)}

    all_ok = all(c["status"] == "ok" for c in checks.values())
    result = {
        "status": "ok" if all_ok else "degraded",
        "checks": checks,
    }
    return JSONResponse(content=result, status_code=200 if all_ok else 503)
