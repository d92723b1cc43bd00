"""Error contracts for requests and pooled jobs.

Two disjoint channels exist for a single request:

- FailureEnvelope: the server answered, but with a non-2xx status. Carries
  status, status text, raw body and parsed headers so callers can inspect
  server-provided error payloads.
- TransportFailure: no valid HTTP exchange completed (network error,
  timeout, explicit abort). Carries no status, headers or body.

Both are raised through asyncio futures, so both are Exception subclasses.
Use is_failure_envelope() to discriminate by shape.
"""

from __future__ import annotations

from typing import Any

from httpool.contracts.enums import TransportFailureKind


class FailureEnvelope(Exception):
    """Non-2xx response surfaced as a data-level rejection.

    Attributes:
        status: HTTP status code as received
        status_text: Reason phrase as received (may be empty)
        body: Raw, undecoded response text
        headers: Parsed response headers (lower-cased names)
    """

    def __init__(
        self,
        status: int,
        status_text: str,
        body: str,
        headers: dict[str, str],
    ) -> None:
        super().__init__(f"HTTP {status} {status_text}".rstrip())
        self.status = status
        self.status_text = status_text
        self.body = body
        self.headers = headers

    def __repr__(self) -> str:
        return f"FailureEnvelope(status={self.status!r}, status_text={self.status_text!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view of the envelope (status, status_text, body, headers)."""
        return {
            "status": self.status,
            "status_text": self.status_text,
            "body": self.body,
            "headers": dict(self.headers),
        }


class TransportFailure(Exception):
    """Base for failures that precede any status line.

    Attributes:
        kind: Which of network / timeout / abort occurred
        method: HTTP method of the failed request
        url: URL of the failed request
    """

    kind: TransportFailureKind

    def __init__(self, message: str, *, method: str, url: str) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class NetworkError(TransportFailure):
    """Connection-level failure: refused, reset, DNS, protocol errors."""

    kind = TransportFailureKind.NETWORK


class RequestTimeoutError(TransportFailure):
    """The request did not finish within its configured timeout.

    Attributes:
        timeout_ms: The deadline that expired, in milliseconds
    """

    kind = TransportFailureKind.TIMEOUT

    def __init__(self, message: str, *, method: str, url: str, timeout_ms: int) -> None:
        super().__init__(message, method=method, url=url)
        self.timeout_ms = timeout_ms


class RequestAbortedError(TransportFailure):
    """The caller aborted the request through its transport handle."""

    kind = TransportFailureKind.ABORT


def is_failure_envelope(error: BaseException) -> bool:
    """Check whether an error carries a response (status, headers and body).

    Transport failures and setup exceptions lack this shape.
    """
    return all(hasattr(error, attr) for attr in ("status", "headers", "body"))
