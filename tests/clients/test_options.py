"""Tests for RequestOptions and RequestDefaults."""

import pytest
from pydantic import ValidationError

from httpool.clients.options import RequestDefaults, RequestOptions
from httpool.contracts import ResponseKind


class TestRequestOptions:
    """Tests for RequestOptions validation and defaults."""

    def test_defaults(self) -> None:
        options = RequestOptions(url="https://api.example.com/items")

        assert options.method == "GET"
        assert options.timeout_ms == 30_000
        assert options.response_kind is ResponseKind.JSON
        assert options.with_credentials is False
        assert options.headers == {}
        assert options.body is None
        assert options.on_chunk is None
        assert options.on_progress is None

    @pytest.mark.parametrize("url", ["", "   "])
    def test_blank_url_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError):
            RequestOptions(url=url)

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestOptions(url="https://api.example.com", timeout_ms=-1)

    def test_zero_timeout_allowed(self) -> None:
        assert RequestOptions(url="https://api.example.com", timeout_ms=0).timeout_ms == 0

    def test_method_is_upper_cased(self) -> None:
        assert RequestOptions(url="https://api.example.com", method="post").method == "POST"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestOptions(url="https://api.example.com", retries=3)

    def test_header_lookup_ignores_case(self) -> None:
        options = RequestOptions(url="https://api.example.com", headers={"Content-Type": "application/json"})

        assert options.header("content-type") == "application/json"
        assert options.header("CONTENT-TYPE") == "application/json"
        assert options.header("accept") is None
        assert options.header("accept", "*/*") == "*/*"

    def test_non_callable_chunk_callback_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestOptions(url="https://api.example.com", on_chunk="print")

    def test_options_are_frozen(self) -> None:
        options = RequestOptions(url="https://api.example.com")

        with pytest.raises(ValidationError):
            options.url = "https://other.example.com"  # type: ignore[misc]


class TestFromDefaults:
    """Tests for RequestOptions.from_defaults."""

    def test_defaults_fill_unset_fields(self) -> None:
        defaults = RequestDefaults(method="POST", timeout_ms=500, response_kind=ResponseKind.TEXT)

        options = RequestOptions.from_defaults(defaults, "https://api.example.com")

        assert options.method == "POST"
        assert options.timeout_ms == 500
        assert options.response_kind is ResponseKind.TEXT

    def test_explicit_overrides_win(self) -> None:
        defaults = RequestDefaults(timeout_ms=500, with_credentials=True)

        options = RequestOptions.from_defaults(
            defaults, "https://api.example.com", timeout_ms=0, with_credentials=False
        )

        assert options.timeout_ms == 0
        assert options.with_credentials is False

    def test_none_overrides_are_ignored(self) -> None:
        options = RequestOptions.from_defaults(RequestDefaults(), "https://api.example.com", method=None)

        assert options.method == "GET"


class TestRequestDefaults:
    """Tests for RequestDefaults validation."""

    def test_documented_defaults(self) -> None:
        defaults = RequestDefaults()

        assert defaults.method == "GET"
        assert defaults.timeout_ms == 30_000
        assert defaults.response_kind is ResponseKind.JSON
        assert defaults.with_credentials is False

    def test_response_kind_from_string(self) -> None:
        assert RequestDefaults(response_kind="binary").response_kind is ResponseKind.BINARY

    def test_invalid_response_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestDefaults(response_kind="document")
