"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from zoodiet.main import app


def test_health_check() -> None:
    """Test basic health check endpoint."""
    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "zoodiet-api"}


def test_root_endpoint() -> None:
    """Test root endpoint returns API info."""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "Zoodiet API"
    assert "version" in data
    assert data["docs"] == "/docs"


def test_request_id_is_echoed() -> None:
    """Test the request id header is passed back to the caller."""
    client = TestClient(app)
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
