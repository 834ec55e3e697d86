"""Alembic environment and revision scripts for the fruits schema."""
