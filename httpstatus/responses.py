"""Delay handling, custom body resolution and response composition."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .codes import allows_body, mdn_link, reason_phrase, status_description
from .exceptions import MalformedRequestBody
from .schemas import StatusEnvelope

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(slots=True)
class RequestTiming:
    """Wall-clock and monotonic marks taken when a request is received."""

    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    started: float = field(default_factory=time.monotonic)

    def elapsed(self) -> float:
        return time.monotonic() - self.started


def parse_sleep(value: str | None) -> int | None:
    """Return the requested delay in milliseconds, or ``None`` to skip it."""

    if value is None:
        return None
    try:
        milliseconds = int(value.strip())
    except ValueError:
        return None
    return milliseconds if milliseconds > 0 else None


async def apply_delay(milliseconds: int | None) -> None:
    if not milliseconds:
        return
    logger.debug("Delaying response by %d ms", milliseconds)
    await asyncio.sleep(milliseconds / 1000)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(raw: str | bytes) -> Any:
    """Strict JSON decoding: ``NaN`` and ``Infinity`` are rejected."""

    return json.loads(raw, parse_constant=_reject_constant)


def decode_body_param(raw: str) -> Any:
    """Decode a ``body`` query value as JSON, falling back to the raw string."""

    try:
        decoded = _loads(raw)
    except ValueError:
        return raw
    return raw if decoded is None else decoded


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def read_request_payload(request: Request) -> Any:
    """Parse the request body for JSON and urlencoded submissions.

    Empty bodies and unsupported content types yield an empty dict.
    """

    media_type = _media_type(request)
    if media_type == "application/x-www-form-urlencoded":
        form = await request.form()
        payload: dict[str, Any] = {}
        for key, value in form.multi_items():
            if key not in payload:
                payload[key] = value
            elif isinstance(payload[key], list):
                payload[key].append(value)
            else:
                payload[key] = [payload[key], value]
        return payload

    if media_type == "application/json" or media_type.endswith("+json"):
        raw = await request.body()
        if not raw:
            return {}
        try:
            return _loads(raw)
        except ValueError as exc:
            raise MalformedRequestBody() from exc
    return {}


def resolve_custom_body(body_param: str | None, method: str, payload: Any) -> Any:
    """Return the caller-supplied body, or ``None`` when the default output applies."""

    if body_param is not None:
        return decode_body_param(body_param)
    if method.upper() in BODY_METHODS and isinstance(payload, (dict, list)) and payload:
        return payload
    return None


def build_envelope(code: int, requested: str, timing: RequestTiming) -> StatusEnvelope:
    elapsed = timing.elapsed()
    return StatusEnvelope(
        code=code,
        requested=requested,
        description=reason_phrase(code),
        details=status_description(code),
        mdn=mdn_link(code),
        received_at=timing.received_at,
        sent_at=datetime.now(UTC),
        duration_ms=round(elapsed * 1000, 3),
        duration_seconds=round(elapsed, 6),
    )


def compose_status_response(
    code: int,
    requested: str,
    custom_body: Any,
    timing: RequestTiming,
    *,
    structured: bool,
) -> Response:
    """Build the outgoing response for a resolved status code.

    A custom body is passed through untouched: objects and arrays as JSON,
    everything else as text. Without one the caller either gets the
    descriptive envelope (``structured``) or ``"<code> <reason>"`` as text.
    """

    if not allows_body(code):
        return Response(status_code=code)

    if custom_body is not None:
        if isinstance(custom_body, (dict, list)):
            return JSONResponse(custom_body, status_code=code)
        text = custom_body if isinstance(custom_body, str) else json.dumps(custom_body)
        return PlainTextResponse(text, status_code=code)

    if structured:
        envelope = build_envelope(code, requested, timing)
        return JSONResponse(jsonable_encoder(envelope), status_code=code)

    return PlainTextResponse(f"{code} {reason_phrase(code)}".strip(), status_code=code)


__all__ = [
    "BODY_METHODS",
    "RequestTiming",
    "apply_delay",
    "build_envelope",
    "compose_status_response",
    "decode_body_param",
    "parse_sleep",
    "read_request_payload",
    "resolve_custom_body",
]
