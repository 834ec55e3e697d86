"""Tests for create_app and create_fruitstand_app wiring."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from fruitstand.app import create_fruitstand_app
from fruitstand.infra.app_factory import DEFAULT_LIFESPAN_HOOKS, create_app
from fruitstand.infra.settings import AppSettings, CORSSettings


def _route_paths(app: FastAPI) -> set[str]:
    # Included-router entries on newer FastAPI have no ``path``.
    return {route.path for route in app.routes if hasattr(route, "path")}


@pytest.mark.unit
class TestCreateApp:
    def test_settings_applied(self) -> None:
        settings = AppSettings(title="Orchard", version="9.9.9")
        app = create_app(settings, database_manager=MagicMock())
        assert app.title == "Orchard"
        assert app.version == "9.9.9"

    def test_database_manager_on_state(self) -> None:
        manager = MagicMock()
        app = create_app(database_manager=manager)
        assert app.state.database_manager is manager

    def test_health_route_always_present(self) -> None:
        assert "/healthz" in _route_paths(create_app(database_manager=MagicMock()))

    def test_extra_routers_included(self) -> None:
        extra = APIRouter()

        @extra.get("/ping")
        def ping() -> dict[str, str]:
            return {"pong": "ok"}

        app = create_app(
            database_manager=MagicMock(),
            extra_routers=[extra],
            exclude_names=frozenset(DEFAULT_LIFESPAN_HOOKS),
        )
        with TestClient(app) as client:
            assert client.get("/ping").json() == {"pong": "ok"}

    def test_exclude_names_skips_persistence(self) -> None:
        manager = MagicMock()
        app = create_app(database_manager=manager, exclude_names=frozenset({"persistence"}))
        with TestClient(app):
            pass
        manager.get_engine.assert_not_called()

    def test_cors_exposes_request_id(self) -> None:
        app = create_app(database_manager=MagicMock(), exclude_names=frozenset({"persistence"}))
        with TestClient(app) as client:
            resp = client.get("/missing", headers={"Origin": "https://shop.example"})
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "X-Request-ID" in resp.headers["access-control-expose-headers"]

    def test_preflight_allows_fruit_methods_only(self) -> None:
        settings = AppSettings(cors=CORSSettings(allow_origins="https://shop.example"))
        app = create_app(
            settings, database_manager=MagicMock(), exclude_names=frozenset({"persistence"})
        )
        preflight = {"Origin": "https://shop.example", "Access-Control-Request-Method": "PATCH"}
        with TestClient(app) as client:
            ok = client.options("/fruits", headers=preflight)
            rejected = client.options(
                "/fruits", headers={**preflight, "Access-Control-Request-Method": "PUT"}
            )
        assert ok.status_code == 200
        assert ok.headers["access-control-allow-origin"] == "https://shop.example"
        assert rejected.status_code == 400

    def test_docs_disabled(self) -> None:
        app = create_app(AppSettings(docs_enabled=False), database_manager=MagicMock())
        paths = _route_paths(app)
        assert "/docs" not in paths
        assert "/openapi.json" not in paths


@pytest.mark.unit
class TestCreateFruitstandApp:
    def test_fruit_routes_registered(self) -> None:
        paths = _route_paths(create_fruitstand_app(database_manager=MagicMock()))
        assert {"/fruits", "/fruits/{fruit_id}", "/healthz"} <= paths
