"""Fruitstand Foundation -- framework-free domain primitives."""

from fruitstand.foundation.exceptions import (
    DataAccessError,
    DomainError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "DataAccessError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
