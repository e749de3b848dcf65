"""FastAPI application factory for the httpstatus service."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from .codes import (
    is_valid_redirect_code,
    parse_status_code_range,
    pick_random_code,
    select_status_code,
)
from .config import Settings
from .exceptions import (
    InvalidRange,
    InvalidRedirectCode,
    MissingRedirectTarget,
    StatusRequestError,
)
from .middleware import RateLimitMiddleware, RobotsTagMiddleware
from .responses import (
    RequestTiming,
    apply_delay,
    compose_status_response,
    parse_sleep,
    read_request_payload,
    resolve_custom_body,
)
from .schemas import EchoPayload

logger = logging.getLogger(__name__)

ANY_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

# First path segments that belong to other routes and are never status codes.
RESERVED_SEGMENTS = frozenset({"", "random", "echo", "health", "docs", "redirect", "openapi.json"})

USAGE_TEXT = """httpstatus service

Usage:
  /<code>                 - Returns the specified HTTP status code
  /random/<range>         - Returns a random status code from a list or range
  /redirect/<code>?to=url - Redirects to url with a 3xx code (300-308)
  /echo                   - Echoes the request method, headers, query and body
  /health                 - Health check

Options:
  ?sleep=ms                - Delay the response by ms milliseconds
  ?body=value              - Respond with value (JSON if it parses, text otherwise)
  Accept: application/json - Get the descriptive JSON response from /<code>

Examples:
  /200                    - Returns HTTP 200 OK
  /404?sleep=1000         - Returns HTTP 404 after 1 second
  /random/200,201,500-504 - Randomly returns one of the listed codes

API documentation: /docs
"""

SLEEP_DESCRIPTION = "Delay the response by this many milliseconds"
BODY_DESCRIPTION = "Response body; decoded as JSON when possible, otherwise sent as text"


def _wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


def _echo_headers(request: Request) -> dict[str, str]:
    headers: dict[str, str] = {}
    for name, value in request.headers.items():
        headers[name] = f"{headers[name]}, {value}" if name in headers else value
    return headers


def _echo_query(request: Request) -> dict[str, Any]:
    query: dict[str, Any] = {}
    for name, value in request.query_params.multi_items():
        if name not in query:
            query[name] = value
        elif isinstance(query[name], list):
            query[name].append(value)
        else:
            query[name] = [query[name], value]
    return query


def _original_url(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Parameters
    ----------
    settings:
        Optional settings, primarily used for injecting test configuration.
        Defaults to :meth:`Settings.from_env`.

    Returns
    -------
    FastAPI
        Configured app instance.
    """

    config = settings or Settings.from_env()

    app = FastAPI(
        title="httpstatus API",
        version="1.0.0",
        description="Minimalist API to simulate HTTP status codes, delays, random codes, redirects, and more.",
        servers=[{"url": config.server_url}],
    )
    app.state.settings = config

    app.add_middleware(
        RateLimitMiddleware,
        limit=config.rate_limit_max,
        window_seconds=config.rate_limit_window_seconds,
    )
    app.add_middleware(RobotsTagMiddleware)

    @app.exception_handler(StatusRequestError)
    async def handle_status_request_error(request: Request, exc: StatusRequestError) -> PlainTextResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.get("/", response_class=PlainTextResponse)
    def usage() -> str:
        """Plain-text usage instructions."""

        return USAGE_TEXT

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        """Health probe endpoint."""

        return "OK"

    async def echo(request: Request) -> EchoPayload:
        """Echo the request method, headers, query parameters and body."""

        return EchoPayload(
            method=request.method,
            headers=_echo_headers(request),
            query=_echo_query(request),
            body=await read_request_payload(request),
            url=_original_url(request),
        )

    @app.get("/redirect/{code}")
    async def redirect(
        code: str,
        to: str | None = Query(default=None, description="Redirect target URL"),
    ) -> Response:
        """Redirect to ``to`` using a 3xx status code between 300 and 308."""

        if not is_valid_redirect_code(code):
            raise InvalidRedirectCode()
        if not to:
            raise MissingRedirectTarget()
        return RedirectResponse(to, status_code=select_status_code(code))

    async def random_status(
        request: Request,
        codes: str,
        sleep: str | None = Query(default=None, description=SLEEP_DESCRIPTION),
        body: str | None = Query(default=None, description=BODY_DESCRIPTION),
    ) -> Response:
        """Return a status code chosen at random from a list or range such as ``200,201,500-504``."""

        timing = RequestTiming()
        candidates = parse_status_code_range(codes)
        if not candidates:
            raise InvalidRange()
        selected = pick_random_code(candidates)
        logger.debug("Selected %d from %r", selected, codes)

        payload = await read_request_payload(request)
        await apply_delay(parse_sleep(sleep))
        custom_body = resolve_custom_body(body, request.method, payload)
        return compose_status_response(selected, codes, custom_body, timing, structured=True)

    async def single_status(
        request: Request,
        code: str,
        sleep: str | None = Query(default=None, description=SLEEP_DESCRIPTION),
        body: str | None = Query(default=None, description=BODY_DESCRIPTION),
    ) -> Response:
        """Return the requested HTTP status code."""

        if code in RESERVED_SEGMENTS:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

        timing = RequestTiming()
        selected = select_status_code(code)

        payload = await read_request_payload(request)
        await apply_delay(parse_sleep(sleep))
        custom_body = resolve_custom_body(body, request.method, payload)
        return compose_status_response(
            selected, code, custom_body, timing, structured=_wants_json(request)
        )

    # One route per method keeps OpenAPI operation ids unique.
    for method in ANY_METHODS:
        suffix = method.lower()
        app.add_api_route(
            "/echo", echo, methods=[method], name=f"echo_{suffix}", response_model=EchoPayload
        )
        app.add_api_route(
            "/random/{codes}", random_status, methods=[method], name=f"random_status_{suffix}"
        )
    for method in ANY_METHODS:
        app.add_api_route("/{code}", single_status, methods=[method], name=f"status_{method.lower()}")

    return app


# ASGI entrypoint for uvicorn and similar servers.
app = create_app()
