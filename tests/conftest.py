"""Shared pytest fixtures for API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from httpstatus import create_app
from httpstatus.config import Settings


@pytest.fixture()
def settings() -> Settings:
    """Settings with a rate limit high enough not to interfere with API tests."""

    return Settings(port=3000, rate_limit_max=10_000, rate_limit_window_minutes=15)


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    """Provide a TestClient backed by a fresh app instance for each test."""

    app = create_app(settings=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
