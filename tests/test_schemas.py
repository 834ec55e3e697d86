"""Unit tests for the fruits request/response models."""

from __future__ import annotations

import pydantic
import pytest

from fruitstand.fruits.domain import Fruit
from fruitstand.fruits.schemas import NAME_MAX_LENGTH, FruitCreate, FruitResponse, FruitUpdate


@pytest.mark.unit
class TestFruitCreate:
    def test_strips_whitespace(self) -> None:
        body = FruitCreate(name="  Apple ", color="red ")
        assert (body.name, body.color) == ("Apple", "red")

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Apple"},
            {"name": "", "color": "red"},
            {"name": "Apple", "color": "x" * (NAME_MAX_LENGTH + 1)},
            {"id": 1, "name": "Apple", "color": "red"},
        ],
    )
    def test_rejects(self, payload: dict) -> None:
        with pytest.raises(pydantic.ValidationError):
            FruitCreate.model_validate(payload)


@pytest.mark.unit
class TestFruitUpdate:
    def test_changes_only_sent_fields(self) -> None:
        assert FruitUpdate(color="green").changes() == {"color": "green"}

    def test_empty_body_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="at least one"):
            FruitUpdate.model_validate({})

    def test_null_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="may not be null"):
            FruitUpdate.model_validate({"name": None, "color": "red"})


@pytest.mark.unit
class TestFruitResponse:
    def test_from_domain_object(self) -> None:
        response = FruitResponse.model_validate(Fruit(id=1, name="Apple", color="red"))
        assert response.model_dump() == {"id": 1, "name": "Apple", "color": "red"}
