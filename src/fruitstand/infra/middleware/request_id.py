"""Request ID middleware for correlation and tracing.

Pure ASGI middleware that extracts or generates an ``X-Request-ID`` for each
request, stores it in a context variable for the request duration, binds it
to structlog's contextvars and echoes it back on the response.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import structlog
from starlette.requests import Request

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.responses import Response

    ErrorHandler = Callable[[Request, Exception], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current request ID, or an empty string outside a request."""
    return request_id_ctx.get()


def _is_valid_uuid(value: str | None) -> bool:
    """Check if value is a valid UUID (any version)."""
    if not value:
        return False
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError):
        return False


def _extract_header(headers: list[tuple[bytes, bytes]], name: bytes) -> str:
    """Extract a header value from raw ASGI headers."""
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return ""


class RequestIdMiddleware:
    """Pure ASGI middleware for X-Request-ID extraction and propagation.

    A missing or non-UUID incoming header is replaced with a fresh UUID4
    rather than rejected.

    When ``error_handler`` is given, exceptions that escape the app are
    rendered here, while the request ID is still bound, so 500 responses
    carry the header and a matching correlation ID. Exceptions raised after
    the response has started are re-raised unchanged.

    Args:
        app: The wrapped ASGI application.
        error_handler: Optional ``(request, exc) -> Response`` coroutine,
            normally :func:`fruitstand.infra.error_handlers.unhandled_exception_handler`.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> app.add_middleware(RequestIdMiddleware, error_handler=unhandled_exception_handler)
    """

    def __init__(self, app: Any, error_handler: ErrorHandler | None = None) -> None:
        self.app = app
        self.error_handler = error_handler

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        headers = scope.get("headers", [])
        request_id = _extract_header(headers, b"x-request-id")

        if not _is_valid_uuid(request_id):
            request_id = str(uuid.uuid4())

        token = request_id_ctx.set(request_id)
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response_started = False

        async def send_with_request_id(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as exc:
            if self.error_handler is None or response_started or scope["type"] != "http":
                raise
            response = await self.error_handler(Request(scope, receive), exc)
            await response(scope, receive, send_with_request_id)
        finally:
            request_id_ctx.reset(token)
            structlog.contextvars.unbind_contextvars("request_id")
