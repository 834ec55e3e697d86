"""Data access for the ``fruits`` table.

Every public method issues exactly one statement built with SQLAlchemy Core.
Driver and connection failures are re-raised as
:class:`~fruitstand.foundation.exceptions.DataAccessError` with the original
exception chained.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from fruitstand.foundation.exceptions import DataAccessError, ValidationError
from fruitstand.fruits.domain import Fruit, FruitNotFoundError
from fruitstand.fruits.tables import MAX_FRUIT_ID, WRITABLE_COLUMNS, fruits
from fruitstand.infra.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy import Executable, Row
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

_RETURNING = (fruits.c.id, fruits.c.name, fruits.c.color)


def _require_storable_id(fruit_id: int) -> None:
    if not 1 <= fruit_id <= MAX_FRUIT_ID:
        raise FruitNotFoundError(fruit_id)


class FruitRepository:
    """CRUD operations on fruits for one session.

    Writes commit immediately; there is no unit of work spanning calls.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[Fruit]:
        """All fruits ordered by id (empty list when the table is empty)."""
        stmt = select(*_RETURNING).order_by(fruits.c.id)
        try:
            result = await self._session.execute(stmt)
            rows = result.mappings().all()
        except SQLAlchemyError as exc:
            raise DataAccessError("list_fruits") from exc
        return [Fruit.from_row(row) for row in rows]

    async def get(self, fruit_id: int) -> Fruit:
        """Fetch one fruit.

        Raises:
            FruitNotFoundError: If no row has this id.
        """
        _require_storable_id(fruit_id)
        stmt = select(*_RETURNING).where(fruits.c.id == fruit_id)
        try:
            result = await self._session.execute(stmt)
            row = result.mappings().one_or_none()
        except SQLAlchemyError as exc:
            raise DataAccessError("get_fruit", fruit_id=fruit_id) from exc
        if row is None:
            raise FruitNotFoundError(fruit_id)
        return Fruit.from_row(row)

    async def create(self, *, name: str, color: str) -> Fruit:
        stmt = insert(fruits).values(name=name, color=color).returning(*_RETURNING)
        row = await self._write("create_fruit", stmt)
        if row is None:
            raise DataAccessError("create_fruit", reason="insert returned no row")
        fruit = Fruit.from_row(row._mapping)
        logger.info("fruit_created", fruit_id=fruit.id)
        return fruit

    async def update(self, fruit_id: int, **changes: Any) -> Fruit:
        """Update only the given columns of one fruit.

        Raises:
            ValidationError: If ``changes`` is empty or names a non-writable column.
            FruitNotFoundError: If no row has this id.
        """
        if not changes:
            raise ValidationError("body", "no fields to update", fruit_id=fruit_id)
        unknown = sorted(set(changes) - WRITABLE_COLUMNS)
        if unknown:
            raise ValidationError(unknown[0], "is not a writable fruit field", fruit_id=fruit_id)
        _require_storable_id(fruit_id)

        stmt = (
            update(fruits)
            .where(fruits.c.id == fruit_id)
            .values(**changes)
            .returning(*_RETURNING)
        )
        row = await self._write("update_fruit", stmt, fruit_id=fruit_id)
        if row is None:
            raise FruitNotFoundError(fruit_id)
        logger.info("fruit_updated", fruit_id=fruit_id, fields=sorted(changes))
        return Fruit.from_row(row._mapping)

    async def delete(self, fruit_id: int) -> None:
        """Delete one fruit.

        Raises:
            FruitNotFoundError: If no row has this id, including a second delete.
        """
        _require_storable_id(fruit_id)
        stmt = delete(fruits).where(fruits.c.id == fruit_id).returning(fruits.c.id)
        row = await self._write("delete_fruit", stmt, fruit_id=fruit_id)
        if row is None:
            raise FruitNotFoundError(fruit_id)
        logger.info("fruit_deleted", fruit_id=fruit_id)

    async def _write(self, operation: str, stmt: Executable, **context: Any) -> Row[Any] | None:
        try:
            result = await self._session.execute(stmt)
            row = result.one_or_none()
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise DataAccessError(operation, **context) from exc
        return row
