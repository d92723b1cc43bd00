# src/httpool/clients/__init__.py
"""Asynchronous HTTP request clients."""

from httpool.clients.decoding import decode_body
from httpool.clients.headers import format_header_block, parse_headers
from httpool.clients.http import (
    RequestClient,
    RequestTask,
    TransportHandle,
    encode_body,
    send_request,
)
from httpool.clients.options import (
    DEFAULT_METHOD,
    DEFAULT_RESPONSE_KIND,
    DEFAULT_TIMEOUT_MS,
    RequestDefaults,
    RequestOptions,
)

__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_RESPONSE_KIND",
    "DEFAULT_TIMEOUT_MS",
    "RequestClient",
    "RequestDefaults",
    "RequestOptions",
    "RequestTask",
    "TransportHandle",
    "decode_body",
    "encode_body",
    "format_header_block",
    "parse_headers",
    "send_request",
]
