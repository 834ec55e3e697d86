"""Fruitstand Infra -- app factory, settings, persistence, logging, error handlers."""

from fruitstand.infra.app_factory import create_app
from fruitstand.infra.database import (
    DatabaseManager,
    DatabaseSettings,
    DbSession,
    get_database_manager,
    get_db_session,
)
from fruitstand.infra.error_handlers import ProblemDetail, register_exception_handlers
from fruitstand.infra.lifespan import LifespanContribution, compose_lifespan
from fruitstand.infra.logging import LoggingSettings, configure_logging, get_logger
from fruitstand.infra.middleware import RequestIdMiddleware, get_request_id
from fruitstand.infra.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "DatabaseManager",
    "DatabaseSettings",
    "DbSession",
    "LifespanContribution",
    "LoggingSettings",
    "ProblemDetail",
    "RequestIdMiddleware",
    "compose_lifespan",
    "configure_logging",
    "create_app",
    "get_database_manager",
    "get_db_session",
    "get_logger",
    "get_request_id",
    "register_exception_handlers",
]
