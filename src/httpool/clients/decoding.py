"""Response body decoding.

decode_body() never raises for malformed payloads. A JSON body that fails
to parse comes back as Raw(text, error) so the request still succeeds with
the undecoded text.
"""

from __future__ import annotations

import json
from json import JSONDecodeError

from httpool.contracts import DecodeResult, Decoded, Raw, ResponseKind


def decode_body(kind: ResponseKind, content: bytes, text: str) -> DecodeResult:
    """Decode a successful response body.

    Args:
        kind: Requested response kind
        content: Body bytes as received (after content-encoding is undone)
        text: The same body decoded to text with the response charset

    Returns:
        Decoded(value) on success; Raw(text, error) when JSON parsing fails
    """
    if kind is ResponseKind.BINARY:
        return Decoded(content)
    if kind is ResponseKind.TEXT:
        return Decoded(text)

    # An empty JSON body is the null value, not a parse failure
    if text == "":
        return Decoded(None)
    try:
        return Decoded(json.loads(text))
    except JSONDecodeError as e:
        return Raw(text=text, error=str(e))
