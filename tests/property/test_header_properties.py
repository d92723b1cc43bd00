# tests/property/test_header_properties.py
"""Property-based tests for header block parsing."""

from hypothesis import given
from hypothesis import strategies as st

from httpool.clients.headers import format_header_block, parse_headers
from tests.property.settings import STANDARD_SETTINGS

header_names = st.text(alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-", min_size=1, max_size=20)
header_values = st.text(
    alphabet=st.characters(min_codepoint=0x21, max_codepoint=0x7E),
    max_size=40,
)


@given(pairs=st.lists(st.tuples(header_names, header_values), max_size=15))
@STANDARD_SETTINGS
def test_parse_matches_last_write_per_lower_cased_name(pairs: list[tuple[str, str]]) -> None:
    expected: dict[str, str] = {}
    for name, value in pairs:
        expected[name.lower()] = value

    assert parse_headers(format_header_block(pairs)) == expected


@given(pairs=st.lists(st.tuples(header_names, header_values), max_size=15))
@STANDARD_SETTINGS
def test_parsed_names_are_lower_case(pairs: list[tuple[str, str]]) -> None:
    assert all(name == name.lower() for name in parse_headers(format_header_block(pairs)))
