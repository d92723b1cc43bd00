"""Shared contracts for cross-boundary data types.

This package is a leaf module: it must not import from clients, pooling or
core at runtime.
"""

from httpool.contracts.enums import ReadyState, ResponseKind, TransportFailureKind
from httpool.contracts.errors import (
    FailureEnvelope,
    NetworkError,
    RequestAbortedError,
    RequestTimeoutError,
    TransportFailure,
    is_failure_envelope,
)
from httpool.contracts.results import (
    DecodeResult,
    Decoded,
    PendingRequest,
    PoolResult,
    ProgressEvent,
    Raw,
    ResponseEnvelope,
)

__all__ = [
    "DecodeResult",
    "Decoded",
    "FailureEnvelope",
    "NetworkError",
    "PendingRequest",
    "PoolResult",
    "ProgressEvent",
    "Raw",
    "ReadyState",
    "RequestAbortedError",
    "RequestTimeoutError",
    "ResponseEnvelope",
    "ResponseKind",
    "TransportFailure",
    "TransportFailureKind",
    "is_failure_envelope",
]
