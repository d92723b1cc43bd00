"""Status codes, states, and kinds shared across the client and the pool."""

from enum import IntEnum, StrEnum


class ResponseKind(StrEnum):
    """How a successful response body is decoded.

    JSON is the default. TEXT and BINARY are decoded natively from the
    received bytes without any parsing step.
    """

    JSON = "json"
    TEXT = "text"
    BINARY = "binary"

    @property
    def is_textual(self) -> bool:
        """True when the body is exposed to callers as text while streaming."""
        return self is not ResponseKind.BINARY


class ReadyState(IntEnum):
    """Lifecycle of a single transport handle.

    Transitions are strictly forward: UNSENT -> OPENED -> HEADERS_RECEIVED
    -> LOADING -> DONE. Failures (network, timeout, abort) jump straight to
    DONE from whatever state the handle was in.
    """

    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class TransportFailureKind(StrEnum):
    """Which transport-level failure ended a request before a valid exchange."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    ABORT = "abort"
