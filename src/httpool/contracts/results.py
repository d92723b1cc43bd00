"""Request and pool outcomes.

These types answer: "What did a request (or a pooled job) produce?"
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from httpool.clients.http import TransportHandle


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Byte-level progress of a response body download.

    Attributes:
        loaded: Bytes received so far (as transferred, before decompression)
        total: Content-Length of the response, if the server sent one
    """

    loaded: int
    total: int | None = None

    @property
    def length_computable(self) -> bool:
        return self.total is not None


@dataclass(frozen=True, slots=True)
class Decoded:
    """Body decoded according to the requested response kind."""

    value: Any


@dataclass(frozen=True, slots=True)
class Raw:
    """Body kept as raw text because decoding failed.

    Attributes:
        text: The undecoded response text
        error: Why decoding failed
    """

    text: str
    error: str


DecodeResult = Decoded | Raw


@dataclass(frozen=True)
class ResponseEnvelope:
    """Successful (2xx) response.

    Attributes:
        status: HTTP status code, always in [200, 300)
        headers: Response headers, lower-cased names, last value wins
        body: Body decoded per the request's response kind, or raw text
            when JSON decoding failed
        handle: The transport handle that produced this response
        decode_error: Set when the body fell back to raw text
    """

    status: int
    headers: dict[str, str]
    body: Any
    handle: TransportHandle
    decode_error: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PendingRequest(NamedTuple):
    """An in-flight request: its completion token and its transport handle."""

    completion: asyncio.Future[ResponseEnvelope]
    handle: TransportHandle


class PoolResult(NamedTuple):
    """Value a pooled job resolves with."""

    result: Any
    handle: Any
