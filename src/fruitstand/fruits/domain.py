"""Fruit domain model and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fruitstand.foundation.exceptions import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Fruit:
    """A row of the ``fruits`` table.

    Example:
        >>> Fruit(id=1, name="Apple", color="red").name
        'Apple'
    """

    id: int
    name: str
    color: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Fruit:
        return cls(id=int(row["id"]), name=str(row["name"]), color=str(row["color"]))


class FruitNotFoundError(NotFoundError):
    """Raised when no fruit has the requested ID."""

    def __init__(self, fruit_id: int) -> None:
        super().__init__("Fruit", fruit_id)
