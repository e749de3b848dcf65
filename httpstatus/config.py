"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

load_dotenv()  # Pick up a local .env before the first Settings.from_env()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_RATE_LIMIT_WINDOW_MINUTES = 15
DEFAULT_RATE_LIMIT_MAX = 100


def _positive_int(raw: str | None, default: int) -> int:
    """Parse ``raw`` as a positive integer, using ``default`` for anything else."""

    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide settings, fixed when the application is created."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    rate_limit_window_minutes: int = DEFAULT_RATE_LIMIT_WINDOW_MINUTES
    rate_limit_max: int = DEFAULT_RATE_LIMIT_MAX
    log_level: str = "info"
    public_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("HOST") or DEFAULT_HOST,
            port=_positive_int(env.get("PORT"), DEFAULT_PORT),
            rate_limit_window_minutes=_positive_int(
                env.get("RATE_LIMIT_WINDOW_MINUTES"), DEFAULT_RATE_LIMIT_WINDOW_MINUTES
            ),
            rate_limit_max=_positive_int(env.get("RATE_LIMIT_MAX"), DEFAULT_RATE_LIMIT_MAX),
            log_level=(env.get("LOG_LEVEL") or "info").lower(),
            public_url=env.get("PUBLIC_URL") or None,
        )

    @property
    def server_url(self) -> str:
        """Base URL advertised in the OpenAPI document."""

        if self.public_url:
            return self.public_url.rstrip("/")
        return f"http://localhost:{self.port}"

    @property
    def rate_limit_window_seconds(self) -> int:
        return self.rate_limit_window_minutes * 60


__all__ = ["Settings"]
