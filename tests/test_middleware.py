"""Tests for rate limiting and response header middleware."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from httpstatus import create_app
from httpstatus.config import Settings
from httpstatus.middleware import RATE_LIMIT_MESSAGE, RateLimitMiddleware


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_limited_app(clock: FakeClock, *, limit: int = 1, window_seconds: int = 60) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    def ping() -> dict[str, str]:
        return {"status": "ok"}

    app.add_middleware(RateLimitMiddleware, limit=limit, window_seconds=window_seconds, clock=clock)
    return app


def test_rate_limit_headers_report_quota() -> None:
    client = TestClient(make_limited_app(FakeClock(), limit=3))

    response = client.get("/ping")

    assert response.status_code == 200
    assert response.headers["ratelimit-limit"] == "3"
    assert response.headers["ratelimit-remaining"] == "2"
    assert response.headers["ratelimit-reset"] == "60"
    assert response.headers["ratelimit-policy"] == "3;w=60"


def test_rate_limit_rejects_requests_over_the_limit() -> None:
    clock = FakeClock()
    client = TestClient(make_limited_app(clock))

    assert client.get("/ping").status_code == 200

    clock.now += 15
    blocked = client.get("/ping")

    assert blocked.status_code == 429
    assert blocked.text == RATE_LIMIT_MESSAGE
    assert blocked.headers["retry-after"] == "45"
    assert blocked.headers["ratelimit-remaining"] == "0"


def test_rate_limit_window_resets() -> None:
    clock = FakeClock()
    client = TestClient(make_limited_app(clock))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 429

    clock.now += 60
    assert client.get("/ping").status_code == 200


def test_app_applies_configured_rate_limit() -> None:
    app = create_app(Settings(rate_limit_max=2, rate_limit_window_minutes=1))
    with TestClient(app) as client:
        statuses = [client.get("/health").status_code for _ in range(3)]
        limited = client.get("/200")

    assert statuses == [200, 200, 429]
    assert limited.status_code == 429
    assert limited.headers["ratelimit-policy"] == "2;w=60"
    assert limited.headers["x-robots-tag"] == "noindex, nofollow"
