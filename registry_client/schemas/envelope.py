"""Response envelope shared by every registry endpoint.

A 2xx body either carries the requested payload or an ``errors`` list
describing a domain failure. The transport unwraps the envelope before any
caller sees the payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiErrorDetail(BaseModel):
    detail: str | None = None


class ApiErrors(BaseModel):
    errors: list[ApiErrorDetail] = Field(default_factory=list)

    def messages(self) -> list[str]:
        return [error.detail or "" for error in self.errors]


def is_error_envelope(body: Any) -> bool:
    """Return True when a decoded JSON body is the error variant."""

    return isinstance(body, dict) and isinstance(body.get("errors"), list)
