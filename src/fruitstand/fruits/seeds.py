"""Seed data for the fruits table.

Seeding replaces the table contents: existing rows are deleted, then the
seed rows are inserted and committed together.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pydantic
from sqlalchemy import delete, insert
from sqlalchemy.exc import SQLAlchemyError

from fruitstand.foundation.exceptions import DataAccessError, ValidationError
from fruitstand.fruits.schemas import FruitCreate
from fruitstand.fruits.tables import fruits
from fruitstand.infra.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_FRUITS: tuple[dict[str, str], ...] = (
    {"name": "Apple", "color": "red"},
    {"name": "Banana", "color": "yellow"},
    {"name": "Grape", "color": "purple"},
    {"name": "Orange", "color": "orange"},
    {"name": "Kiwi", "color": "green"},
)


def load_seed_file(path: Path) -> list[dict[str, str]]:
    """Read seed rows from a JSON array of ``{"name", "color"}`` objects.

    Raises:
        ValidationError: If the file is not a JSON array or an entry is malformed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValidationError("file", exc.strerror or "unreadable", path=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise ValidationError("file", f"invalid JSON: {exc.msg}", path=str(path)) from exc

    if not isinstance(data, list):
        raise ValidationError("file", "expected a JSON array of fruits", path=str(path))

    rows: list[dict[str, str]] = []
    for index, entry in enumerate(data):
        try:
            fruit = FruitCreate.model_validate(entry)
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            raise ValidationError(f"[{index}]", first["msg"], path=str(path)) from exc
        rows.append(fruit.model_dump())
    return rows


async def run_seed(
    session: AsyncSession,
    seed_rows: Sequence[dict[str, str]] = DEFAULT_FRUITS,
) -> int:
    """Replace every fruit with ``seed_rows``; return the number inserted."""
    try:
        await session.execute(delete(fruits))
        if seed_rows:
            await session.execute(insert(fruits), [dict(row) for row in seed_rows])
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise DataAccessError("seed_fruits") from exc

    logger.info("fruits_seeded", count=len(seed_rows))
    return len(seed_rows)
