"""
Shared pytest fixtures for all test modules.

Firebase and Redis are replaced by in-memory mocks; inference stays disabled
unless a test turns it on explicitly.
"""

import os
import random

os.environ["TESTING"] = "true"
os.environ["INFERENCE_API_KEY"] = ""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from tests.mocks.firebase_mock import MockFirestore
from tests.mocks.redis_mock import MockRedis

from app.main import app  # noqa: E402
from app.schemas.analysis import MediaAsset  # noqa: E402


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_firebase(monkeypatch):
    """Replace firebase.db with an in-memory MockFirestore."""
    from app.integrations import firebase as fb

    mock_db = MockFirestore()
    monkeypatch.setattr(fb, "db", mock_db)
    return mock_db


@pytest.fixture
def mock_redis(monkeypatch):
    """Replace redis_client.client with an in-memory MockRedis."""
    from app.integrations import redis_client as rc

    mock_rc = MockRedis()
    monkeypatch.setattr(rc, "client", mock_rc)
    return mock_rc


@pytest.fixture
def client(mock_firebase, mock_redis):
    """
    FastAPI TestClient with mocked Firebase and Redis.

    initialize() calls are patched to no-ops so they can't overwrite our mocks
    or attempt real network connections during the lifespan startup.
    """
    with (
        patch("app.integrations.firebase.initialize"),
        patch("app.integrations.redis_client.initialize"),
    ):
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


@pytest.fixture
def rng():
    return random.Random(1234)


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------

MB = 1024 * 1024

HUMAN_TEXT = (
    "I remember the storm last week, my friend and I got stuck at teh station for hours. "
    "We shared a sandwich and watched the trains come and go while the rain hammered the roof."
)

FORMAL_TEXT = (
    "Artificial intelligence systems are transforming the modern workplace in many significant and often unexpected ways for every organization. "
    "Furthermore, organizations must carefully evaluate the long term implications of this transition before committing significant resources to it. "
    "Moreover, leaders should establish clear governance frameworks for responsible technology adoption across all departments and regional offices worldwide. "
    "Additionally, employees require structured training programs to adapt to evolving responsibilities and new collaborative tools in their roles. "
    "Consequently, the organizations that invest early and thoughtfully will likely gain a durable competitive advantage in their markets."
)


def make_asset(name: str, mime_type: str, size: int = MB, content: bytes = b"") -> MediaAsset:
    return MediaAsset(name=name, mime_type=mime_type, size=size, content=content)
