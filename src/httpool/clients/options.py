# src/httpool/clients/options.py
"""Request options and per-client request defaults."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, Field, field_validator

from httpool.contracts import ProgressEvent, ResponseKind

DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_RESPONSE_KIND = ResponseKind.JSON

ChunkCallback = Callable[[str], object]
ProgressCallback = Callable[[ProgressEvent], object]


class RequestDefaults(BaseModel):
    """Defaults a RequestClient applies to options the caller leaves unset.

    Attributes:
        method: HTTP method (default: GET)
        timeout_ms: Total request deadline in milliseconds, 0 disables it
        response_kind: How successful bodies are decoded (default: json)
        with_credentials: Attach client cookies and auth (default: False)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    method: str = Field(DEFAULT_METHOD, min_length=1, description="HTTP method")
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, ge=0, description="Request timeout in milliseconds")
    response_kind: ResponseKind = Field(DEFAULT_RESPONSE_KIND, description="Response decode kind")
    with_credentials: bool = Field(False, description="Send client cookies and auth")

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        return value.upper()


class RequestOptions(BaseModel):
    """Everything needed to start one request.

    Headers keep the caller's key casing on the wire; header() reads them
    case-insensitively.
    """

    model_config = {"frozen": True, "extra": "forbid", "arbitrary_types_allowed": True}

    url: str = Field(min_length=1, description="Absolute URL, or a path when sent through a RequestClient")
    method: str = Field(DEFAULT_METHOD, min_length=1)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, ge=0)
    with_credentials: bool = False
    response_kind: ResponseKind = DEFAULT_RESPONSE_KIND
    on_progress: ProgressCallback | None = None
    on_chunk: ChunkCallback | None = None

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be blank")
        return value

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        return value.upper()

    def header(self, name: str, default: str | None = None) -> str | None:
        """Look up a request header ignoring case."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @classmethod
    def from_defaults(cls, defaults: RequestDefaults, url: str, **overrides: Any) -> RequestOptions:
        """Build options from client defaults, letting explicit overrides win."""
        values: dict[str, Any] = {
            "method": defaults.method,
            "timeout_ms": defaults.timeout_ms,
            "response_kind": defaults.response_kind,
            "with_credentials": defaults.with_credentials,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(url=url, **values)
