"""
Tests for common utility functions.

Tests HttpMethod parsing, collapse_slashes(), safe_json_parse() and the
console color helpers.
"""

import pytest

from fakeend.common import (
    HttpMethod,
    collapse_slashes,
    safe_json_parse,
    status_color,
    method_color,
    colorize
)
from fakeend.common.utils import (
    ANSI_BLUE,
    ANSI_CYAN,
    ANSI_GREEN,
    ANSI_RED,
    ANSI_RESET,
    ANSI_YELLOW
)


class TestHttpMethod:
    """Test suite for HttpMethod.parse()."""

    @pytest.mark.parametrize('value,expected', [
        ('GET', HttpMethod.GET),
        ('post', HttpMethod.POST),
        (' Put ', HttpMethod.PUT),
        ('delete', HttpMethod.DELETE),
        ('PATCH', HttpMethod.PATCH),
    ])
    def test_valid_methods(self, value, expected):
        """Test case-insensitive parsing of supported methods."""
        assert HttpMethod.parse(value) is expected

    @pytest.mark.parametrize('value', ['HEAD', 'OPTIONS', '', None, 1, ['GET']])
    def test_invalid_methods(self, value):
        """Test that anything else parses to None."""
        assert HttpMethod.parse(value) is None

    def test_str(self):
        assert str(HttpMethod.GET) == 'GET'
        assert f"{HttpMethod.DELETE}" == 'DELETE'


class TestCollapseSlashes:
    """Test suite for collapse_slashes() function."""

    def test_double_slash(self):
        assert collapse_slashes('/users//:id') == '/users/:id'

    def test_long_runs(self):
        assert collapse_slashes('///a////b/') == '/a/b/'

    def test_clean_path_unchanged(self):
        assert collapse_slashes('/api/v1/products') == '/api/v1/products'


class TestSafeJsonParse:
    """Test suite for safe_json_parse() function."""

    def test_valid_json(self):
        assert safe_json_parse('{"a": 1}') == {'a': 1}

    def test_bytes(self):
        assert safe_json_parse(b'[1, 2]') == [1, 2]

    def test_invalid_json_returns_default(self):
        assert safe_json_parse('{oops', default={}) == {}

    def test_empty_returns_default(self):
        assert safe_json_parse('') is None
        assert safe_json_parse(None, default='x') == 'x'

    def test_invalid_utf8(self):
        assert safe_json_parse(b'\xc3\x28') is None


class TestStatusColor:
    """Test suite for status_color() function."""

    @pytest.mark.parametrize('status,color', [
        (200, ANSI_GREEN),
        (204, ANSI_GREEN),
        (301, ANSI_CYAN),
        (404, ANSI_YELLOW),
        (500, ANSI_RED),
        (599, ANSI_RED),
    ])
    def test_ranges(self, status, color):
        assert status_color(status) == color

    def test_informational_uncolored(self):
        assert status_color(101) == ""


class TestColorize:
    """Test suite for colorize() and method_color()."""

    def test_wraps_text(self):
        assert colorize('GET', ANSI_BLUE) == f"{ANSI_BLUE}GET{ANSI_RESET}"

    def test_disabled(self):
        assert colorize('GET', ANSI_BLUE, enabled=False) == 'GET'

    def test_no_color(self):
        assert colorize('GET', '') == 'GET'

    def test_method_color(self):
        assert method_color('get') == ANSI_BLUE
        assert method_color(HttpMethod.DELETE) == ANSI_RED
        assert method_color('TRACE') == ""
