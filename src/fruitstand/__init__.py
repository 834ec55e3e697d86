"""Fruitstand -- a CRUD REST API for fruits on FastAPI and SQLAlchemy."""

__version__ = "0.1.0"
