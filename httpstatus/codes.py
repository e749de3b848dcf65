"""Status code validation, range parsing and descriptive metadata."""

from __future__ import annotations

import random
from http import HTTPStatus
from typing import Any, Sequence

from .exceptions import InvalidRange, InvalidStatusCode

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599
MIN_REDIRECT_CODE = 300
MAX_REDIRECT_CODE = 308

MDN_STATUS_URL = "https://developer.mozilla.org/en-US/docs/Web/HTTP/Status/{code}"

STATUS_DESCRIPTIONS: dict[int, str] = {
    200: "OK: The request has succeeded.",
    201: "Created: The request has been fulfilled and resulted in a new resource being created.",
    202: "Accepted: The request has been accepted for processing, but the processing has not been completed.",
    204: "No Content: The server successfully processed the request, but is not returning any content.",
    301: "Moved Permanently: The resource has been moved to a new URL.",
    302: "Found: The resource resides temporarily under a different URL.",
    400: "Bad Request: The server could not understand the request due to invalid syntax.",
    401: "Unauthorized: The client must authenticate itself to get the requested response.",
    403: "Forbidden: The client does not have access rights to the content.",
    404: "Not Found: The server can not find the requested resource.",
    500: "Internal Server Error: The server has encountered a situation it doesn't know how to handle.",
    502: "Bad Gateway: The server was acting as a gateway or proxy and received an invalid response.",
    503: "Service Unavailable: The server is not ready to handle the request.",
    504: "Gateway Timeout: The server is acting as a gateway and cannot get a response in time.",
}


def _as_int(value: Any) -> int | None:
    """Convert ``value`` to an integer, returning ``None`` when it is not integral."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if not isinstance(value, str):
        return None

    candidate = value.strip()
    if not candidate:
        return None
    try:
        return int(candidate)
    except ValueError:
        pass
    try:
        number = float(candidate)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def is_valid_status_code(value: Any) -> bool:
    """Return ``True`` when ``value`` is an integer between 100 and 599."""

    number = _as_int(value)
    return number is not None and MIN_STATUS_CODE <= number <= MAX_STATUS_CODE


def is_valid_redirect_code(value: Any) -> bool:
    """Return ``True`` when ``value`` is an integer between 300 and 308."""

    number = _as_int(value)
    return number is not None and MIN_REDIRECT_CODE <= number <= MAX_REDIRECT_CODE


def parse_status_code_range(text: str) -> list[int]:
    """Expand a specification such as ``"200,201,500-504"`` into status codes.

    Segments that are not a valid code or a valid ascending range are skipped,
    so the result may be empty. Order and duplicates are preserved.
    """

    codes: list[int] = []
    for segment in text.split(","):
        if "-" in segment:
            start, end = (_as_int(piece) for piece in segment.split("-")[:2])
            if (
                start is not None
                and end is not None
                and start <= end
                and is_valid_status_code(start)
                and is_valid_status_code(end)
            ):
                codes.extend(range(start, end + 1))
            continue

        code = _as_int(segment)
        if code is not None and is_valid_status_code(code):
            codes.append(code)
    return codes


def select_status_code(value: Any) -> int:
    """Return the validated status code for the single-code endpoint."""

    if not is_valid_status_code(value):
        raise InvalidStatusCode()
    return _as_int(value)


def pick_random_code(codes: Sequence[int], rng: random.Random | None = None) -> int:
    """Choose one code uniformly from ``codes``."""

    if not codes:
        raise InvalidRange()
    return (rng or random).choice(codes)


def reason_phrase(code: int) -> str:
    """Return the standard reason phrase for ``code`` or ``""`` when unknown."""

    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def status_description(code: int) -> str:
    return STATUS_DESCRIPTIONS.get(code, "")


def mdn_link(code: int) -> str:
    return MDN_STATUS_URL.format(code=code)


def allows_body(code: int) -> bool:
    """Informational, 204 and 304 responses never carry a payload."""

    return code >= 200 and code not in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED)


__all__ = [
    "MDN_STATUS_URL",
    "STATUS_DESCRIPTIONS",
    "allows_body",
    "is_valid_redirect_code",
    "is_valid_status_code",
    "mdn_link",
    "parse_status_code_range",
    "pick_random_code",
    "reason_phrase",
    "select_status_code",
    "status_description",
]
