"""
httpool: asynchronous HTTP requests with bounded-concurrency scheduling.

Issue many requests against rate- or resource-constrained backends while
controlling how many run at once.
"""

from httpool.clients import RequestClient, RequestDefaults, RequestOptions, TransportHandle, send_request
from httpool.contracts import (
    FailureEnvelope,
    NetworkError,
    PendingRequest,
    PoolResult,
    ProgressEvent,
    ReadyState,
    RequestAbortedError,
    RequestTimeoutError,
    ResponseEnvelope,
    ResponseKind,
    TransportFailure,
    is_failure_envelope,
)
from httpool.pooling import ConcurrencyPool, PoolConfig

__version__ = "0.1.0"

__all__ = [
    "ConcurrencyPool",
    "FailureEnvelope",
    "NetworkError",
    "PendingRequest",
    "PoolConfig",
    "PoolResult",
    "ProgressEvent",
    "ReadyState",
    "RequestAbortedError",
    "RequestClient",
    "RequestDefaults",
    "RequestOptions",
    "RequestTimeoutError",
    "ResponseEnvelope",
    "ResponseKind",
    "TransportFailure",
    "TransportHandle",
    "is_failure_envelope",
    "send_request",
]
