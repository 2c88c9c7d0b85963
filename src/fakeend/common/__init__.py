"""
FakeEnd Common Utilities

Shared types and helpers used across FakeEnd modules.
"""

from .types import HttpMethod, JSONValue, BODY_METHODS
from .utils import collapse_slashes, safe_json_parse, status_color, method_color, colorize

__all__ = [
    'HttpMethod',
    'JSONValue',
    'BODY_METHODS',
    'collapse_slashes',
    'safe_json_parse',
    'status_color',
    'method_color',
    'colorize',
]
