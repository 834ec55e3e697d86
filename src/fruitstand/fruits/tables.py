"""SQLAlchemy Core table definitions for the fruits schema.

Queries are built against these objects; the Alembic revision in
``fruitstand.migrations`` creates the same table.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table

metadata = MetaData()

fruits = Table(
    "fruits",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("color", String(255), nullable=False),
)

# Columns a client may write; ``id`` is assigned by the database.
WRITABLE_COLUMNS = frozenset({"name", "color"})

# ``Integer`` is a 4-byte column on PostgreSQL; ids outside 1..MAX_FRUIT_ID
# can never be stored, and drivers reject them as parameters.
MAX_FRUIT_ID = 2**31 - 1
