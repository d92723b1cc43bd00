"""Response header block parsing."""

from __future__ import annotations

from collections.abc import Iterable

HEADER_SEPARATOR = ": "


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse a raw response header block into a dict.

    Lines break only at LF (with an optional preceding CR), so NEL and
    Unicode line separators inside a value stay part of it. Each
    non-blank line is split at the first ": " into name and value;
    the value keeps any further separators intact. Names are lower-cased
    and a repeated header keeps its last value.

    Args:
        raw: Header block, lines separated by CRLF or LF (may be None)

    Returns:
        Mapping of lower-cased header name to value

    Example:
        >>> parse_headers("Content-Type: application/json\\r\\nX-Id: a: b\\r\\n")
        {'content-type': 'application/json', 'x-id': 'a: b'}
    """
    headers: dict[str, str] = {}
    if not raw:
        return headers

    for line in raw.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        name, _, value = line.partition(HEADER_SEPARATOR)
        headers[name.lower()] = value
    return headers


def format_header_block(pairs: Iterable[tuple[str, str]]) -> str:
    """Render header pairs as a CRLF-terminated block, one header per line."""
    return "".join(f"{name}{HEADER_SEPARATOR}{value}\r\n" for name, value in pairs)
