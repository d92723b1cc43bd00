# src/httpool/clients/http.py
"""Asynchronous request lifecycle over httpx.

send_request() starts one HTTP exchange in an asyncio task and returns
immediately with a PendingRequest: a completion future plus the live
TransportHandle. The future resolves with a ResponseEnvelope for 2xx
answers and rejects with either a FailureEnvelope (any other status) or a
TransportFailure (network error, timeout, abort). Setup errors such as an
unsendable body reject the future instead of raising at the call site.

While the body streams in, the request can report:
- partial text increments to an on_chunk callback (never the cumulative
  body; callback exceptions are contained)
- byte-level ProgressEvents to an on_progress callback
"""

from __future__ import annotations

import asyncio
import codecs
import json
import time
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from httpool.clients.decoding import decode_body
from httpool.clients.headers import format_header_block, parse_headers
from httpool.clients.options import RequestDefaults, RequestOptions
from httpool.contracts import (
    FailureEnvelope,
    NetworkError,
    PendingRequest,
    ProgressEvent,
    Raw,
    ReadyState,
    RequestAbortedError,
    RequestTimeoutError,
    ResponseEnvelope,
    ResponseKind,
)

logger = structlog.get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"


def encode_body(body: Any, content_type: str | None) -> bytes | str | None:
    """Turn a request body into something the transport can send.

    Structured values (mappings, lists, tuples) are serialized to JSON text
    only when the content type declares JSON. Strings and bytes are sent as
    given; None means no body.

    Raises:
        TypeError: For structured bodies without a JSON content type, or for
            any other unsupported body type
    """
    if body is None:
        return None
    if isinstance(body, str | bytes):
        return body
    if isinstance(body, bytearray | memoryview):
        return bytes(body)
    if isinstance(body, Mapping | list | tuple):
        if content_type is not None and JSON_MEDIA_TYPE in content_type.lower():
            return json.dumps(body, separators=(",", ":"))
        raise TypeError(
            f"Cannot send a {type(body).__name__} body without a '{JSON_MEDIA_TYPE}' content-type header"
        )
    raise TypeError(f"Unsupported request body type: {type(body).__name__}")


def _timeout_seconds(timeout_ms: int) -> float | None:
    """Convert a millisecond timeout to seconds; 0 means no deadline."""
    if timeout_ms == 0:
        return None
    return timeout_ms / 1000


class TransportHandle:
    """Live view of one HTTP exchange.

    Exposes the exchange's ready state, status line, headers and the body
    received so far, and lets the caller abort it. An abort always ends the
    request through the failure path with RequestAbortedError.
    """

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        self.ready_state = ReadyState.UNSENT
        self.response_kind = ResponseKind.JSON
        self.timeout_ms = 0
        self.with_credentials = False
        self.request: httpx.Request | None = None
        self.response: httpx.Response | None = None
        self._content = bytearray()
        self._text_parts: list[str] = []
        self._decoder: codecs.IncrementalDecoder | None = None
        self._aborted = False
        self._task: asyncio.Task[ResponseEnvelope] | None = None

    def __repr__(self) -> str:
        return f"<TransportHandle {self.method} {self.url} state={self.ready_state.name}>"

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def done(self) -> bool:
        return self.ready_state is ReadyState.DONE

    @property
    def status(self) -> int:
        """HTTP status, 0 until the status line has been received."""
        if self.response is None:
            return 0
        return self.response.status_code

    @property
    def status_text(self) -> str:
        if self.response is None:
            return ""
        return self.response.reason_phrase

    @property
    def content(self) -> bytes:
        """Body bytes received so far."""
        return bytes(self._content)

    @property
    def response_text(self) -> str:
        """Body text decoded so far."""
        return "".join(self._text_parts)

    def get_all_response_headers(self) -> str:
        """Response headers as a CRLF block, in the order received.

        Bytes are decoded with the encoding httpx detects for the header set
        (ascii, then utf-8, then latin-1).
        """
        if self.response is None:
            return ""
        headers = self.response.headers
        return format_header_block(
            (name.decode(headers.encoding), value.decode(headers.encoding)) for name, value in headers.raw
        )

    def abort(self) -> bool:
        """Abort the exchange.

        Returns:
            True if the abort was requested, False if the exchange had
            already finished or was already aborted
        """
        if self.done or self._aborted:
            return False
        self._aborted = True
        if self._task is not None:
            self._task.cancel()
        return True

    def _on_headers(self, response: httpx.Response) -> None:
        self.response = response
        self._decoder = codecs.getincrementaldecoder(response.encoding or "utf-8")(errors="replace")
        self.ready_state = ReadyState.HEADERS_RECEIVED

    def _receive(self, chunk: bytes) -> str:
        """Append a body chunk and return the newly decoded text."""
        self.ready_state = ReadyState.LOADING
        self._content.extend(chunk)
        return self._append_text(chunk, final=False)

    def _finish_text(self) -> str:
        """Flush the decoder and return any trailing text."""
        return self._append_text(b"", final=True)

    def _append_text(self, data: bytes, *, final: bool) -> str:
        if self._decoder is None:
            return ""
        text = self._decoder.decode(data, final=final)
        if text:
            self._text_parts.append(text)
        return text


class RequestTask:
    """One request's lifecycle: setup, streaming exchange, settlement.

    Must be created inside a running event loop. Use send_request() rather
    than instantiating this directly.
    """

    def __init__(self, options: RequestOptions, client: httpx.AsyncClient | None = None) -> None:
        self._options = options
        self._client = client
        self._loop = asyncio.get_running_loop()
        self.handle = TransportHandle(options.method, options.url)
        self.completion: asyncio.Future[ResponseEnvelope] = self._loop.create_future()

    def start(self) -> PendingRequest:
        """Prepare the request and schedule the exchange.

        Never raises for setup failures: they reject the completion future.
        """
        try:
            request = self._prepare()
        except Exception as e:
            self.handle.ready_state = ReadyState.DONE
            logger.debug(
                "http_request_setup_failed",
                method=self._options.method,
                url=self._options.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            self.completion.set_exception(e)
            return PendingRequest(self.completion, self.handle)

        task = self._loop.create_task(self._run(request))
        self.handle._task = task
        task.add_done_callback(self._on_task_done)
        self.completion.add_done_callback(self._on_completion_done)
        return PendingRequest(self.completion, self.handle)

    def _prepare(self) -> httpx.Request:
        options = self._options
        handle = self.handle

        handle.ready_state = ReadyState.OPENED
        handle.with_credentials = options.with_credentials
        handle.timeout_ms = options.timeout_ms
        handle.response_kind = options.response_kind

        content = encode_body(options.body, options.header("content-type"))
        headers = httpx.Headers(options.headers)
        timeout = httpx.Timeout(_timeout_seconds(options.timeout_ms))

        if self._client is None:
            request = httpx.Request(
                options.method,
                options.url,
                headers=headers,
                content=content,
                extensions={"timeout": timeout.as_dict()},
            )
        else:
            request = self._client.build_request(
                options.method,
                options.url,
                headers=headers,
                content=content,
                timeout=timeout,
            )
            # Cookies from the client jar only travel with credentials
            if not options.with_credentials and options.header("cookie") is None:
                request.headers.pop("cookie", None)

        handle.request = request
        return request

    async def _run(self, request: httpx.Request) -> ResponseEnvelope:
        options = self._options
        handle = self.handle
        start = time.perf_counter()

        logger.debug("http_request_started", method=options.method, url=options.url)
        try:
            async with asyncio.timeout(_timeout_seconds(options.timeout_ms)):
                if self._client is None:
                    async with httpx.AsyncClient(follow_redirects=True) as client:
                        await self._exchange(client, request)
                else:
                    await self._exchange(self._client, request)
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.debug("http_request_failed", method=options.method, url=options.url, kind="timeout")
            raise RequestTimeoutError(
                f"Timeout after {options.timeout_ms}ms",
                method=options.method,
                url=options.url,
                timeout_ms=options.timeout_ms,
            ) from e
        except httpx.RequestError as e:
            logger.debug(
                "http_request_failed",
                method=options.method,
                url=options.url,
                kind="network",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NetworkError(f"Network error: {e}", method=options.method, url=options.url) from e
        finally:
            handle.ready_state = ReadyState.DONE

        latency_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "http_request_completed",
            method=options.method,
            url=options.url,
            status=handle.status,
            latency_ms=latency_ms,
        )
        return self._settle_response()

    async def _send(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        """Send the request, following redirects one hop at a time.

        httpx rebuilds every redirect request from the client cookie jar, so
        without credentials the cookie header is stripped again on each hop.
        Redirects are followed only when the client is configured to.
        """
        auth = httpx.USE_CLIENT_DEFAULT if self._options.with_credentials else None
        hops = 0
        while True:
            response = await client.send(request, stream=True, auth=auth, follow_redirects=False)
            next_request = response.next_request
            if next_request is None or not client.follow_redirects:
                return response
            await response.aclose()

            hops += 1
            if hops > client.max_redirects:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=next_request)
            if not self._options.with_credentials:
                next_request.headers.pop("cookie", None)
            logger.debug("http_request_redirected", method=next_request.method, url=str(next_request.url))
            request = self.handle.request = next_request

    async def _exchange(self, client: httpx.AsyncClient, request: httpx.Request) -> None:
        response = await self._send(client, request)
        try:
            self.handle._on_headers(response)
            total = _content_length(response)
            async for chunk in response.aiter_bytes():
                self._notify_chunk(self.handle._receive(chunk))
                self._notify_progress(ProgressEvent(loaded=response.num_bytes_downloaded, total=total))
            self._notify_chunk(self.handle._finish_text())
        finally:
            await response.aclose()

    def _notify_chunk(self, increment: str) -> None:
        on_chunk = self._options.on_chunk
        if on_chunk is None or not increment or not self._options.response_kind.is_textual:
            return
        try:
            on_chunk(increment)
        except Exception:
            # A faulty chunk consumer must never fail the request
            logger.debug("chunk_callback_failed", url=self._options.url, exc_info=True)

    def _notify_progress(self, event: ProgressEvent) -> None:
        if self._options.on_progress is not None:
            self._options.on_progress(event)

    def _settle_response(self) -> ResponseEnvelope:
        handle = self.handle
        status = handle.status
        headers = parse_headers(handle.get_all_response_headers())

        if not 200 <= status < 300:
            raise FailureEnvelope(status, handle.status_text, handle.response_text, headers)

        decoded = decode_body(self._options.response_kind, handle.content, handle.response_text)
        if isinstance(decoded, Raw):
            logger.warning(
                "response_decode_fallback",
                url=self._options.url,
                status=status,
                body_preview=decoded.text[:200],
                error=decoded.error,
            )
            return ResponseEnvelope(status, headers, decoded.text, handle, decode_error=decoded.error)
        return ResponseEnvelope(status, headers, decoded.value, handle)

    def _on_task_done(self, task: asyncio.Task[ResponseEnvelope]) -> None:
        completion = self.completion
        if task.cancelled():
            self.handle.ready_state = ReadyState.DONE
            if completion.done():
                return
            if self.handle.aborted:
                logger.debug("http_request_failed", method=self._options.method, url=self._options.url, kind="abort")
                completion.set_exception(
                    RequestAbortedError("Request aborted", method=self._options.method, url=self._options.url)
                )
            else:
                completion.cancel()
            return

        error = task.exception()
        if completion.done():
            return
        if error is not None:
            completion.set_exception(error)
        else:
            completion.set_result(task.result())

    def _on_completion_done(self, completion: asyncio.Future[ResponseEnvelope]) -> None:
        if completion.cancelled():
            self.handle.abort()


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("content-length")
    if value is None or not value.isdigit():
        return None
    return int(value)


def send_request(options: RequestOptions, *, client: httpx.AsyncClient | None = None) -> PendingRequest:
    """Start a request and return its completion future and transport handle.

    Must be called from a running event loop. Returns without waiting for
    any network activity.

    on_chunk is not called once per network chunk: a chunk whose bytes
    decode to no new text (an incomplete multi-byte character) produces no
    call, and text held back by the decoder at end of body arrives in one
    extra call after the last chunk. Binary responses never call it.

    Args:
        options: What to send and how to decode the answer
        client: Shared httpx client (a private one is created and closed
            per request when omitted)

    Returns:
        PendingRequest(completion, handle)

    Example:
        completion, handle = send_request(RequestOptions(url="https://api.example.com/items"))
        envelope = await completion
        print(envelope.status, envelope.body)
    """
    return RequestTask(options, client).start()


class RequestClient:
    """Shared-connection client that fills requests from RequestDefaults.

    Holds one httpx.AsyncClient for connection reuse, an optional base URL
    and default headers. Request headers override default headers of the
    same name regardless of case.

    Example:
        async with RequestClient(base_url="https://api.example.com") as client:
            completion, handle = client.get("/v1/items", headers={"Accept": "application/json"})
            envelope = await completion
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        headers: dict[str, str] | None = None,
        defaults: RequestDefaults | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url
        self._default_headers = headers or {}
        self._defaults = defaults or RequestDefaults()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    @property
    def defaults(self) -> RequestDefaults:
        return self._defaults

    async def __aenter__(self) -> RequestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def _resolve_url(self, url: str) -> str:
        """Join base_url with path, handling slash combinations."""
        if self._base_url and not url.startswith(("http://", "https://")):
            base = self._base_url.rstrip("/")
            path = url.lstrip("/")
            return f"{base}/{path}"
        return url

    def _merge_headers(self, headers: dict[str, str]) -> dict[str, str]:
        overridden = {name.lower() for name in headers}
        merged = {k: v for k, v in self._default_headers.items() if k.lower() not in overridden}
        merged.update(headers)
        return merged

    def send(self, options: RequestOptions) -> PendingRequest:
        """Send fully built options through the shared client."""
        prepared = options.model_copy(
            update={
                "url": self._resolve_url(options.url),
                "headers": self._merge_headers(options.headers),
            }
        )
        return send_request(prepared, client=self._client)

    def request(self, url: str, **overrides: Any) -> PendingRequest:
        """Build options from this client's defaults and send them."""
        return self.send(RequestOptions.from_defaults(self._defaults, url, **overrides))

    def get(self, url: str, **overrides: Any) -> PendingRequest:
        return self.request(url, method="GET", **overrides)

    def post(self, url: str, *, body: Any = None, **overrides: Any) -> PendingRequest:
        return self.request(url, method="POST", body=body, **overrides)
