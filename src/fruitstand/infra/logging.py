"""Structured logging configuration using structlog.

- JSON output in production, colored console output otherwise
- ``request_id`` merged in from RequestIdMiddleware via contextvars
- Sensitive fields redacted before rendering

Usage:
    from fruitstand.infra.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("fruit_created", fruit_id=3)
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import MutableMapping

Processor = structlog.types.Processor

SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "authorization",
        "api_key",
        "apikey",
        "secret",
        "credential",
        "database_url",
        "dsn",
    }
)

REDACTED_VALUE: str = "***REDACTED***"

_VALID_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LoggingSettings(BaseSettings):
    """Logging configuration from ``LOG_LEVEL`` and ``ENVIRONMENT``.

    Environment variables:
    - LOG_LEVEL: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Deployment name; ``production`` switches to JSON output

    Attributes:
        log_level: Minimum level to emit. Default: INFO
        environment: Deployment name used to pick the renderer. Default: development

    Example:
        >>> LoggingSettings().use_json_logs
        False
        >>> LoggingSettings(environment="production").use_json_logs
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Minimum log level to output",
    )
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Environment name for format selection",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case the level so ``LOG_LEVEL=debug`` is accepted.

        Args:
            v: Raw level from the environment or a keyword argument.

        Returns:
            The level as an upper-case string.
        """
        if isinstance(v, str):
            return v.upper()
        return str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Reject levels the stdlib ``logging`` module does not define.

        Args:
            v: Normalized level string.

        Returns:
            The unchanged level.

        Raises:
            ValueError: If the level is unknown.
        """
        if v not in _VALID_LEVELS:
            msg = f"log_level must be one of {sorted(_VALID_LEVELS)}"
            raise ValueError(msg)
        return v

    @property
    def use_json_logs(self) -> bool:
        """True in production, where logs are shipped as JSON lines."""
        return self.environment == "production"

    @property
    def log_level_int(self) -> int:
        """Numeric level for structlog's filtering logger and ``logging.basicConfig``.

        Returns:
            One of the ``logging`` module's level constants.
        """
        return getattr(logging, self.log_level, logging.INFO)


class SensitiveDataProcessor:
    """Structlog processor that redacts sensitive fields from the event dict.

    A key is sensitive when it is in ``SENSITIVE_FIELDS`` (case-insensitive)
    or contains "password" or "token". Connection strings logged as
    ``database_url`` or ``dsn`` are covered by the first rule.

    Example:
        >>> processor = SensitiveDataProcessor()
        >>> processor(None, "info", {"event": "connect", "dsn": "postgresql://..."})["dsn"]
        '***REDACTED***'
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        """Replace the value of every sensitive key with ``REDACTED_VALUE``.

        Args:
            logger: Wrapped logger (unused).
            method_name: Name of the log method called (unused).
            event_dict: Event fields bound so far.

        Returns:
            The same ``event_dict`` with sensitive values redacted.
        """
        for key in list(event_dict.keys()):
            if self._is_sensitive(key):
                event_dict[key] = REDACTED_VALUE
        return event_dict

    def _is_sensitive(self, key: str) -> bool:
        key_lower = key.lower()
        if key_lower in SENSITIVE_FIELDS:
            return True
        # Compound names such as db_password or refresh_token
        return "password" in key_lower or "token" in key_lower


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get the cached LoggingSettings instance.

    Settings are read from the environment once per process. Tests that
    patch ``LOG_LEVEL`` or ``ENVIRONMENT`` call
    ``get_logging_settings.cache_clear()`` first.

    Returns:
        The process-wide LoggingSettings.
    """
    return LoggingSettings()


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    The processor chain:
    - merges contextvars, which carries ``request_id`` from RequestIdMiddleware
    - adds the level and an ISO 8601 UTC timestamp
    - redacts sensitive fields
    - renders JSON in production and colored console output elsewhere

    Called once at startup, from the app's logging lifespan hook or from the
    ``fruitstand`` CLI entry point. Calling it again replaces the
    configuration.

    Args:
        settings: Optional settings; loaded from the environment when omitted.

    Example:
        >>> configure_logging()
        >>> configure_logging(LoggingSettings(log_level="DEBUG", environment="production"))
    """
    if settings is None:
        settings = get_logging_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        SensitiveDataProcessor(),
        structlog.processors.format_exc_info,
    ]

    if settings.use_json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level_int),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Infra modules log through stdlib logging.
    logging.basicConfig(
        level=settings.log_level_int,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def get_logger(name: str | None = None) -> structlog.typing.WrappedLogger:
    """Get a structlog logger bound to the given name.

    Every entry carries ``logger=<name>`` plus whatever is bound in
    contextvars, so repository events such as ``fruit_created`` can be
    traced back to the request that caused them.

    Args:
        name: Logger name, typically ``__name__``. Unbound when None.

    Returns:
        A bound structlog logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("fruit_deleted", fruit_id=3)
    """
    logger = structlog.get_logger()
    if name is not None:
        logger = logger.bind(logger=name)
    return logger
