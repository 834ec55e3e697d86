"""RFC 7807 Problem Details exception handlers for FastAPI.

Translates domain exceptions into ``application/problem+json`` responses.

Usage:
    from fruitstand.infra.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fruitstand.foundation.exceptions import (
    DataAccessError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from fruitstand.infra.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response model.

    Standard fields are ``type``, ``title``, ``status``, ``detail`` and
    ``instance``. Extension fields:

    - error_code: Machine-readable error code for client handling
    - context: Structured debugging information
    - correlation_id: Request correlation ID (5xx errors only)
    """

    type: str = Field(
        ...,
        description="URI reference identifying problem type",
        examples=["/errors/not-found", "/errors/request-validation-error"],
    )
    title: str = Field(
        ...,
        description="Short human-readable summary",
        examples=["Resource Not Found", "Bad Request"],
    )
    status: int = Field(..., ge=400, le=599, description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference to specific occurrence (request path)",
    )
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code",
        examples=["RESOURCE_NOT_FOUND", "REQUEST_VALIDATION_ERROR"],
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Structured debugging information",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for support requests",
    )


_SENSITIVE_PATTERNS = [
    (
        re.compile(r"postgresql(\+\w+)?://[^@\s]*@[^/\s]*"),
        "postgresql://[REDACTED]@[REDACTED]",
    ),
    (
        re.compile(r"password\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "password=[REDACTED]",
    ),
    (
        re.compile(r"secret\s*=\s*['\"]?[^'\"\s]+['\"]?", re.IGNORECASE),
        "secret=[REDACTED]",
    ),
]

_SENSITIVE_KEYS = frozenset({"password", "secret", "token", "api_key", "apikey", "credential"})


def _create_problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _get_correlation_id() -> str:
    """Request ID set by RequestIdMiddleware, or "unknown" outside a request."""
    return get_request_id() or "unknown"


def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any] | None:
    """Make a context dict safe to send to clients.

    Drops sensitive keys, stringifies UUIDs/datetimes, redacts connection
    strings and anything else not JSON-serializable is stringified.
    """
    if context is None:
        return None

    sanitized = {}
    for key, value in context.items():
        if _is_sensitive_key(key):
            continue
        sanitized[key] = _sanitize_value(value)

    return sanitized if sanitized else None


def _is_sensitive_key(key: str) -> bool:
    return key.lower() in _SENSITIVE_KEYS


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _redact_sensitive_strings(value)
    if isinstance(value, dict):
        return _sanitize_context(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(v) for v in value]
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _redact_sensitive_strings(text: str) -> str:
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Translate NotFoundError to 404."""
    problem = ProblemDetail(
        type="/errors/not-found",
        title="Resource Not Found",
        status=404,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def validation_error_handler(
    request: Request,
    exc: ValidationError,
) -> JSONResponse:
    """Translate domain ValidationError to 422 with field-level details."""
    problem = ProblemDetail(
        type="/errors/validation-error",
        title="Validation Error",
        status=422,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def data_access_error_handler(
    request: Request,
    exc: DataAccessError,
) -> JSONResponse:
    """Translate DataAccessError to a sanitized 500.

    The chained driver exception is logged with the correlation ID; the
    client only learns which operation failed.
    """
    correlation_id = _get_correlation_id()
    logger.error(
        "data_access_error",
        exc_info=exc,
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "operation": exc.operation,
        },
    )
    problem = ProblemDetail(
        type="/errors/data-access-error",
        title="Internal Server Error",
        status=500,
        detail="The database could not complete the request.",
        instance=str(request.url.path),
        error_code=exc.error_code,
        context={"operation": exc.operation},
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


async def domain_error_handler(
    request: Request,
    exc: DomainError,
) -> JSONResponse:
    """Fallback for domain errors without a more specific handler: 400."""
    problem = ProblemDetail(
        type="/errors/domain-error",
        title="Bad Request",
        status=400,
        detail=str(exc),
        instance=str(request.url.path),
        error_code=exc.error_code,
        context=_sanitize_context(exc.context),
    )
    return _create_problem_response(problem)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate Pydantic RequestValidationError to 400 Bad Request.

    Covers request bodies, query parameters and path parameters.
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "loc": list(error.get("loc", [])),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
        )

    problem = ProblemDetail(
        type="/errors/request-validation-error",
        title="Bad Request",
        status=400,
        detail="Request validation failed",
        instance=str(request.url.path),
        error_code="REQUEST_VALIDATION_ERROR",
        context={"errors": errors},
    )
    return _create_problem_response(problem)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    ``create_app`` hands this to RequestIdMiddleware, which calls it while the
    request ID is still bound. The registration on ``Exception`` only covers
    apps built without that middleware.

    Logs full details; the response carries only the correlation ID unless
    the app runs in debug mode.
    """
    correlation_id = _get_correlation_id()

    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": correlation_id,
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    debug_mode = getattr(request.app, "debug", False)

    if debug_mode:
        detail = f"{type(exc).__name__}: {exc}"
        context: dict[str, Any] | None = {"exception_type": type(exc).__name__}
    else:
        detail = "An internal error occurred. Please contact support with the correlation ID."
        context = None

    problem = ProblemDetail(
        type="/errors/internal-error",
        title="Internal Server Error",
        status=500,
        detail=detail,
        instance=str(request.url.path),
        error_code="INTERNAL_ERROR",
        context=context,
        correlation_id=correlation_id,
    )
    return _create_problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application.

    Most specific first:
    1. NotFoundError -> 404
    2. ValidationError -> 422
    3. DataAccessError -> 500
    4. DomainError -> 400 (base class fallback)
    5. RequestValidationError -> 400 (Pydantic)
    6. Exception -> 500 (catch-all, see unhandled_exception_handler)
    """
    # Starlette's handler typing is stricter than the handlers need.
    app.add_exception_handler(
        NotFoundError,
        not_found_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        ValidationError,
        validation_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        DataAccessError,
        data_access_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        DomainError,
        domain_error_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
