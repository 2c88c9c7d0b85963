"""
FakeEnd Shared Types

HTTP method enumeration and the JSON-like value shape used for response
templates.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Response templates come straight from YAML: scalars, ordered lists and
# insertion-ordered mappings, nested arbitrarily.
JSONValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class HttpMethod(str, Enum):
    """HTTP methods a mock endpoint may declare."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: Any) -> Optional["HttpMethod"]:
        """
        Parse a method name case-insensitively.

        Args:
            value: Raw value from a definition file or request

        Returns:
            Matching HttpMethod, or None if the value is not a recognized method
        """
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# Methods that carry a request body worth documenting
BODY_METHODS = (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)
