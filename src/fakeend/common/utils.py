"""
FakeEnd Common Utilities

Helpers shared by the loader, the mock server and the CLI:
- Route path normalization
- Lenient JSON parsing
- Console color formatting
"""

import json
import re
from typing import Any

from .types import HttpMethod

# HTTP status code ranges
HTTP_STATUS_2XX_MIN = 200
HTTP_STATUS_2XX_MAX = 300
HTTP_STATUS_3XX_MIN = 300
HTTP_STATUS_3XX_MAX = 400
HTTP_STATUS_4XX_MIN = 400
HTTP_STATUS_4XX_MAX = 500
HTTP_STATUS_5XX_MIN = 500
HTTP_STATUS_5XX_MAX = 600

# ANSI color codes
ANSI_BLUE = "\033[34m"
ANSI_GREEN = "\033[32m"
ANSI_CYAN = "\033[36m"
ANSI_YELLOW = "\033[33m"
ANSI_RED = "\033[31m"
ANSI_MAGENTA = "\033[35m"
ANSI_GRAY = "\033[90m"
ANSI_RESET = "\033[0m"

METHOD_COLORS = {
    HttpMethod.GET: ANSI_BLUE,
    HttpMethod.POST: ANSI_GREEN,
    HttpMethod.PUT: ANSI_YELLOW,
    HttpMethod.DELETE: ANSI_RED,
    HttpMethod.PATCH: ANSI_MAGENTA,
}

_SLASH_RUN = re.compile(r'/+')


def collapse_slashes(path: str) -> str:
    """
    Collapse every run of consecutive '/' into a single '/'.

    Example:
        collapse_slashes('/users//:id')  # '/users/:id'
    """
    return _SLASH_RUN.sub('/', path)


def safe_json_parse(json_string: Any, default: Any = None) -> Any:
    """
    Safely parse JSON text with error handling.

    Args:
        json_string: JSON text (str or bytes) to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON object, or default if parsing fails
    """
    if not json_string:
        return default

    try:
        return json.loads(json_string)
    except (json.JSONDecodeError, TypeError, ValueError, UnicodeDecodeError):
        return default


def status_color(status: int) -> str:
    """
    Get ANSI color code for HTTP status code.

    Color coding:
    - 2xx (Success): Green
    - 3xx (Redirect): Cyan
    - 4xx (Client Error): Yellow
    - 5xx (Server Error): Red

    Args:
        status: HTTP status code (200, 404, 500, etc.)

    Returns:
        ANSI escape code for color
    """
    if HTTP_STATUS_2XX_MIN <= status < HTTP_STATUS_2XX_MAX:
        return ANSI_GREEN
    elif HTTP_STATUS_3XX_MIN <= status < HTTP_STATUS_3XX_MAX:
        return ANSI_CYAN
    elif HTTP_STATUS_4XX_MIN <= status < HTTP_STATUS_4XX_MAX:
        return ANSI_YELLOW
    elif HTTP_STATUS_5XX_MIN <= status < HTTP_STATUS_5XX_MAX:
        return ANSI_RED
    return ""


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Wrap text in an ANSI color code (no-op when disabled or color is empty)."""
    if not enabled or not color:
        return text
    return f"{color}{text}{ANSI_RESET}"


def method_color(method: Any) -> str:
    """Get ANSI color code for an HTTP method name."""
    parsed = HttpMethod.parse(method)
    return METHOD_COLORS.get(parsed, "") if parsed else ""
