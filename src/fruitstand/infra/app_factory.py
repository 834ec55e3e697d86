"""FastAPI application factory.

Provides :func:`create_app`, which wires settings, the database manager,
middleware, error handlers, lifespan hooks and routers into one app.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from fruitstand.infra.database import DatabaseManager, get_database_manager
from fruitstand.infra.error_handlers import (
    register_exception_handlers,
    unhandled_exception_handler,
)
from fruitstand.infra.health import router as health_router
from fruitstand.infra.lifespan import (
    LifespanContribution,
    compose_lifespan,
    logging_contribution,
    persistence_contribution,
)
from fruitstand.infra.middleware.request_id import RequestIdMiddleware
from fruitstand.infra.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

logger = logging.getLogger(__name__)

DEFAULT_LIFESPAN_HOOKS: dict[str, LifespanContribution] = {
    "logging": logging_contribution,
    "persistence": persistence_contribution,
}


def create_app(
    settings: AppSettings | None = None,
    *,
    database_manager: DatabaseManager | None = None,
    extra_routers: list[APIRouter] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    exclude_names: frozenset[str] = frozenset(),
) -> FastAPI:
    """Create a FastAPI application.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        database_manager: Engine owner for this app. Defaults to the
            environment-configured singleton.
        extra_routers: Routers to include after the health router.
        extra_lifespan_hooks: Lifespan hooks beyond the built-in ones.
        exclude_names: Built-in lifespan hooks to skip ("logging", "persistence").

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()

    lifespan_hooks = [
        hook for name, hook in DEFAULT_LIFESPAN_HOOKS.items() if name not in exclude_names
    ]
    lifespan_hooks.extend(extra_lifespan_hooks or [])

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=compose_lifespan(lifespan_hooks),
    )
    app.state.database_manager = database_manager or get_database_manager()

    # Starlette wraps in reverse order: request-id ends up outermost, so it
    # renders unhandled errors before ServerErrorMiddleware sees them.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )
    app.add_middleware(RequestIdMiddleware, error_handler=unhandled_exception_handler)

    register_exception_handlers(app)

    for router in [health_router, *(extra_routers or [])]:
        app.include_router(router)
        logger.debug("Included router: %r", router)

    return app
