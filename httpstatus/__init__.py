"""HTTP status code simulation service."""
from __future__ import annotations

import logging
from typing import Any

import uvicorn

from .app import create_app
from .config import Settings


def main(**uvicorn_kwargs: Any) -> None:
    """Run the httpstatus service using ``uvicorn``.

    Parameters
    ----------
    **uvicorn_kwargs: Any
        Optional keyword arguments forwarded to :func:`uvicorn.run`.
    """

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    config = {
        "app": "httpstatus.app:create_app",
        "factory": True,
        "host": settings.host,
        "port": settings.port,
        "log_level": settings.log_level,
        # Honour X-Forwarded-For from the fronting proxy so rate limits key on the real client.
        "proxy_headers": True,
        "forwarded_allow_ips": "*",
    }
    config.update(uvicorn_kwargs)

    uvicorn.run(**config)


__all__ = ["Settings", "create_app", "main"]
