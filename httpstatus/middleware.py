"""HTTP middleware wrapped around every route."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


@dataclass(slots=True)
class _Window:
    """Request count for one client inside the current fixed window."""

    count: int
    resets_at: float


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limit keyed by client address.

    Every response reports the quota through the ``RateLimit-*`` headers; the
    request that exceeds it receives ``429`` with ``Retry-After``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_sweep = 0.0

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        if now < self._next_sweep:
            return
        expired = [key for key, window in self._windows.items() if window.resets_at <= now]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self._window_seconds

    def _hit(self, key: str, now: float) -> _Window:
        self._sweep(now)
        window = self._windows.get(key)
        if window is None or window.resets_at <= now:
            window = _Window(count=0, resets_at=now + self._window_seconds)
            self._windows[key] = window
        window.count += 1
        return window

    def _apply_headers(self, response: Response, window: _Window, now: float) -> None:
        reset = max(math.ceil(window.resets_at - now), 0)
        response.headers["RateLimit-Policy"] = f"{self._limit};w={self._window_seconds}"
        response.headers["RateLimit-Limit"] = str(self._limit)
        response.headers["RateLimit-Remaining"] = str(max(self._limit - window.count, 0))
        response.headers["RateLimit-Reset"] = str(reset)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        key = self._client_key(request)
        now = self._clock()
        window = self._hit(key, now)

        if window.count > self._limit:
            logger.warning("Rate limit exceeded for %s (%d requests)", key, window.count)
            response: Response = PlainTextResponse(RATE_LIMIT_MESSAGE, status_code=429)
            response.headers["Retry-After"] = str(max(math.ceil(window.resets_at - now), 0))
        else:
            response = await call_next(request)

        self._apply_headers(response, window, now)
        return response


class RobotsTagMiddleware(BaseHTTPMiddleware):
    """Ask crawlers not to index any response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Robots-Tag"] = "noindex, nofollow"
        return response


__all__ = ["RATE_LIMIT_MESSAGE", "RateLimitMiddleware", "RobotsTagMiddleware"]
