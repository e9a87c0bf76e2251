# =============================================================================
# tests/test_rate_limit.py - Rate Limiting Tests
# =============================================================================

import time

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app import rate_limit as rate_limit_module
from app.config import settings
from app.exceptions import EnzoLearnException, enzolearn_exception_handler
from app.rate_limit import rate_limit, reset_local_counters


@pytest.fixture
def limited_app(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)
    reset_local_counters()

    test_app = FastAPI()
    test_app.add_exception_handler(EnzoLearnException, enzolearn_exception_handler)

    @test_app.get("/limited", dependencies=[Depends(rate_limit("test", limit=2, window_seconds=60))])
    def limited():
        return {"ok": True}

    yield test_app
    reset_local_counters()


class TestRateLimit:
    """Tests for the fixed-window limiter."""

    def test_blocks_after_quota(self, limited_app):
        client = TestClient(limited_app)

        assert client.get("/limited").status_code == 200
        assert client.get("/limited").status_code == 200
        response = client.get("/limited")

        assert response.status_code == 429
        assert response.json()["error"] == "Too many requests, please try again later."
        assert 0 < int(response.headers["Retry-After"]) <= 60

    def test_forwarded_header_ignored_by_default(self, limited_app):
        client = TestClient(limited_app)

        statuses = [
            client.get("/limited", headers={"X-Forwarded-For": f"1.2.3.{i}"}).status_code
            for i in range(5)
        ]

        assert statuses == [200, 200, 429, 429, 429]
        assert len(rate_limit_module._local_counters) == 1

    def test_forwarded_header_used_behind_trusted_proxy(self, limited_app, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY", True)
        client = TestClient(limited_app)

        for _ in range(2):
            client.get("/limited", headers={"X-Forwarded-For": "10.0.0.1, 172.16.0.1"})

        assert client.get("/limited", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
        assert client.get("/limited", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200

    def test_expired_windows_are_pruned(self, limited_app):
        past = time.time() - 1
        for i in range(3):
            rate_limit_module._local_counters[f"enzolearn:rate:test:10.0.1.{i}"] = (1, past)
        client = TestClient(limited_app)

        client.get("/limited")

        assert list(rate_limit_module._local_counters) == ["enzolearn:rate:test:testclient"]

    def test_can_be_disabled(self, limited_app):
        limited_app.state.disable_rate_limits = True
        client = TestClient(limited_app)

        assert all(client.get("/limited").status_code == 200 for _ in range(5))

    def test_api_routers_are_limited(self, app, monkeypatch):
        monkeypatch.setattr(settings, "REDIS_URL", None)
        reset_local_counters()
        app.state.disable_rate_limits = False

        client = TestClient(app)
        statuses = [client.get("/api/health").status_code for _ in range(settings.RATE_LIMIT_REQUESTS + 1)]

        reset_local_counters()
        assert statuses[:-1] == [200] * settings.RATE_LIMIT_REQUESTS
        assert statuses[-1] == 429
