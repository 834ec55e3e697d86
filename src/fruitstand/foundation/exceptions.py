"""Domain exception hierarchy for type-safe error handling.

Exceptions carry a machine-readable error code and structured context so the
HTTP layer can render consistent problem responses and log entries stay
greppable.

Example:
    >>> from fruitstand.foundation.exceptions import NotFoundError
    >>> raise NotFoundError("Fruit", 42)
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "DataAccessError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (resource ids, field names).

    Example:
        >>> raise DomainError("Operation failed", context={"fruit_id": 7})
        DomainError: Operation failed (fruit_id=7)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Example:
        >>> raise NotFoundError("Fruit", 42)
        NotFoundError: Fruit not found: 42
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: int | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "Fruit").
            resource_id: Identifier of the missing resource.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input fails a domain rule.

    Maps to HTTP 422 Unprocessable Entity. Request-shape problems caught by
    Pydantic never reach this class; they surface as 400 instead.

    Example:
        >>> raise ValidationError("color", "must not be blank")
        ValidationError: Validation failed for 'color': must not be blank
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation (dot notation allowed).
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class DataAccessError(DomainError):
    """Raised when the database is unreachable or a query fails.

    Maps to HTTP 500. The original driver exception is chained as
    ``__cause__`` and is only ever logged, never sent to clients.

    Attributes:
        operation: Name of the data-access operation that failed.
    """

    error_code: str = "DATA_ACCESS_ERROR"

    def __init__(self, operation: str, **extra_context: Any) -> None:
        """Initialize data access error.

        Args:
            operation: Repository or migration step that failed
                (e.g., "get_fruit", "migrate").
            **extra_context: Identifiers of the affected rows, such as ``fruit_id``.
        """
        self.operation = operation
        message = f"Data access failed during '{operation}'"
        super().__init__(message, {"operation": operation, **extra_context})
