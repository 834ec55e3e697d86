"""Unit tests for fruitstand.foundation.exceptions."""

from __future__ import annotations

import pytest

from fruitstand.foundation.exceptions import (
    DataAccessError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from fruitstand.fruits.domain import FruitNotFoundError


@pytest.mark.unit
class TestDomainError:
    def test_message_and_context(self) -> None:
        exc = DomainError("Operation failed", context={"fruit_id": 7})
        assert exc.message == "Operation failed"
        assert exc.context == {"fruit_id": 7}
        assert str(exc) == "Operation failed (fruit_id=7)"

    def test_without_context(self) -> None:
        exc = DomainError("Operation failed")
        assert exc.context == {}
        assert str(exc) == "Operation failed"

    def test_repr(self) -> None:
        assert repr(DomainError("x")) == "DomainError('x', context={})"


@pytest.mark.unit
class TestSubclasses:
    def test_not_found(self) -> None:
        exc = NotFoundError("Fruit", 42)
        assert exc.error_code == "RESOURCE_NOT_FOUND"
        assert exc.message == "Fruit not found: 42"
        assert exc.context == {"resource_type": "Fruit", "resource_id": "42"}
        assert isinstance(exc, DomainError)

    def test_fruit_not_found(self) -> None:
        exc = FruitNotFoundError(9)
        assert isinstance(exc, NotFoundError)
        assert exc.resource_id == 9
        assert exc.resource_type == "Fruit"

    def test_validation(self) -> None:
        exc = ValidationError("name", "must not be blank", value="")
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.message == "Validation failed for 'name': must not be blank"
        assert exc.context == {"field": "name", "reason": "must not be blank", "value": ""}

    def test_data_access(self) -> None:
        exc = DataAccessError("update_fruit", fruit_id=3)
        assert exc.error_code == "DATA_ACCESS_ERROR"
        assert exc.operation == "update_fruit"
        assert exc.context == {"operation": "update_fruit", "fruit_id": 3}
