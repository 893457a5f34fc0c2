from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ou_overlay.config import Settings
from ou_overlay.main import create_app


@pytest.fixture
def make_client():
    def _make(**overrides) -> TestClient:
        settings = Settings(**{"build_id": "test-build", **overrides})
        return TestClient(create_app(settings))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
