"""Response payload models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class StatusEnvelope(BaseModel):
    """Descriptive payload returned when no custom body is supplied."""

    code: int = Field(..., ge=100, le=599)
    requested: str = Field(..., description="Code or range specification from the request path")
    description: str = Field(default="", description="Standard reason phrase")
    details: str = Field(default="", description="Short definition of the status code")
    mdn: str
    received_at: datetime
    sent_at: datetime
    duration_ms: float = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0)


class EchoPayload(BaseModel):
    method: str
    headers: dict[str, str]
    query: dict[str, Any]
    body: Any = None
    url: str


__all__ = ["EchoPayload", "StatusEnvelope"]
