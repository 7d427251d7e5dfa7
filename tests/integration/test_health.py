"""Tests for health, metrics and static routes."""

from fastapi.testclient import TestClient

from voicebridge.main import create_app


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["environment"] == "test"
    assert data["checks"]["translation_provider"] == "scripted"


def test_live(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_metrics(client):
    client.post("/translate", json={"q": "hello", "target": "kn"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "translation_requests_total" in response.text


def test_metrics_disabled(settings):
    settings = settings.model_copy(update={"prometheus_enabled": False})

    with TestClient(create_app(settings)) as client:
        assert client.get("/metrics").status_code == 404


def test_lifespan_builds_configured_provider(settings):
    with TestClient(create_app(settings)) as client:
        data = client.get("/health").json()

    assert data["checks"]["translation_provider"] == "stub"


def test_index_served(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_unknown_path_falls_back_to_index(client):
    response = client.get("/some/client/route")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_static_script(client):
    response = client.get("/static/script.js")

    assert response.status_code == 200
