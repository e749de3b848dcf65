"""Client errors raised while interpreting a status request."""

from __future__ import annotations


class StatusRequestError(ValueError):
    """Base class for request problems reported back as plain-text 4xx responses."""

    status_code = 400
    message = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidStatusCode(StatusRequestError):
    """Raised when a path code is not an integer between 100 and 599."""

    message = "Invalid HTTP status code"


class InvalidRange(StatusRequestError):
    """Raised when a range specification yields no usable status codes."""

    message = "Invalid range for random status codes"


class InvalidRedirectCode(StatusRequestError):
    """Raised when a redirect code falls outside 300-308."""

    message = "Invalid redirect status code (must be 300-308)"


class MissingRedirectTarget(StatusRequestError):
    """Raised when ``/redirect`` is called without a ``to`` target."""

    message = 'Missing "to" query parameter for redirect target'


class MalformedRequestBody(StatusRequestError):
    """Raised when a JSON request body cannot be decoded."""

    message = "Malformed JSON request body"


__all__ = [
    "InvalidRange",
    "InvalidRedirectCode",
    "InvalidStatusCode",
    "MalformedRequestBody",
    "MissingRedirectTarget",
    "StatusRequestError",
]
