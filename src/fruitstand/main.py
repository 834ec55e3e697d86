"""ASGI entry point: ``uvicorn fruitstand.main:app``."""

from fruitstand.app import create_fruitstand_app

app = create_fruitstand_app()
