# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Tests for the application wiring: root, health, docs and mounted routes.
"""
from fastapi.testclient import TestClient

from coach_partner.config import settings
from coach_partner.main import app

http = TestClient(app)


def test_root_links() -> None:
    data = http.get("/").json()
    assert data == {"message": "Coach Partner Service", "docs": "/docs", "health": "/health"}


def test_health_reports_app_version() -> None:
    """Health endpoint reports the version the app was built with."""
    response = http.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": app.version}
    assert app.version == "0.1.0"


def test_openapi_lists_coaching_routes() -> None:
    schema = http.get("/openapi.json").json()
    assert schema["info"]["title"] == settings.APP_NAME
    paths = schema["paths"]
    assert "/api/v1/clients/{client_id}/messages" in paths
    assert "/api/v1/sections/{section_id}/revert" in paths
    assert "patch" in paths["/api/v1/sections/{section_id}"]


def test_cors_allows_configured_origin() -> None:
    origin = settings.get_cors_origins()[0]
    response = http.options(
        "/health",
        headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == origin
