"""Tests for GET /health and GET /robots.txt."""

from app.config import settings
from app.integrations import firebase, redis_client


def test_health_reports_backends(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "modalities": ["media", "voice", "text", "location", "combined"],
        "inference": "heuristics-only",
        "history": "firestore",
        "cache": "redis",
    }


def test_health_degraded_backends(client, monkeypatch):
    monkeypatch.setattr(firebase, "db", None)
    monkeypatch.setattr(redis_client, "client", None)
    monkeypatch.setattr(settings, "inference_api_key", "hf_test")

    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["history"] == "disabled"
    assert data["cache"] == "memory"
    assert data["inference"] == "enabled"


def test_robots_txt_blocks_api(client):
    response = client.get("/robots.txt")
    assert response.status_code == 200
    assert "User-agent: *" in response.text
    assert "Disallow: /api/" in response.text


def test_redis_initialize_without_credentials(monkeypatch):
    monkeypatch.setattr(settings, "upstash_redis_host", "")
    monkeypatch.setattr(redis_client, "client", object())

    redis_client.initialize()

    assert redis_client.client is None
    assert redis_client.backend_name() == "memory"
