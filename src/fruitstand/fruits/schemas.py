"""Pydantic request/response models for the fruits endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

NAME_MAX_LENGTH = 255


class FruitCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, examples=["Apple"])
    color: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, examples=["red"])


class FruitUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    color: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)

    @model_validator(mode="after")
    def _require_non_null_change(self) -> FruitUpdate:
        if not self.model_fields_set:
            msg = "at least one of 'name' or 'color' is required"
            raise ValueError(msg)
        for field in sorted(self.model_fields_set):
            if getattr(self, field) is None:
                msg = f"'{field}' may not be null"
                raise ValueError(msg)
        return self

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class FruitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
