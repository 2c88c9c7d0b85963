"""
FakeEnd Request Observers

The mock server reports what it does through an observer instead of writing
to the console itself. LoggingObserver is the default; tests and embedding
applications can pass their own.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Any, Optional

from ..common import colorize, method_color, status_color
from ..common.utils import ANSI_BLUE, ANSI_GRAY, ANSI_RED
from ..loader import ResolvedEndpoint


@dataclass
class RequestEvent:
    """Outcome of one handled request."""

    outcome: str                    # matched, unmatched
    method: str
    path: str
    status: int
    duration_ms: float = 0.0
    source_id: Optional[str] = None
    full_path: Optional[str] = None
    delay_ms: int = 0
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    @property
    def matched(self) -> bool:
        return self.outcome == 'matched'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data['duration_ms'] = round(self.duration_ms, 2)
        return data


class RequestObserver:
    """Receives structured events from the mock server. All hooks are no-ops."""

    def endpoint_skipped(self, endpoint: ResolvedEndpoint, reason: str):
        """An endpoint could not be registered."""

    def request_matched(self, method: str, path: str, endpoint: ResolvedEndpoint):
        """A request matched an endpoint; rendering follows."""

    def request_delayed(self, method: str, path: str, delay_ms: int):
        """A matched request is waiting for its declared delay."""

    def request_completed(self, event: RequestEvent):
        """A matched request was answered."""

    def request_unmatched(self, event: RequestEvent):
        """A request matched no endpoint and got the not-found envelope."""


class LoggingObserver(RequestObserver):
    """
    Observer writing request traces through the standard logging module.

    Example:
        observer = LoggingObserver(colors=False)
        server = MockServer(endpoints, observer=observer)
    """

    def __init__(self, logger: Optional[logging.Logger] = None, colors: bool = True):
        """
        Initialize logging observer.

        Args:
            logger: Logger to write to (default: "fakeend.mock")
            colors: Color method names and status codes with ANSI codes
        """
        self.logger = logger or logging.getLogger("fakeend.mock")
        self.colors = colors

    def _method(self, method: str) -> str:
        return colorize(method, method_color(method), self.colors)

    def endpoint_skipped(self, endpoint: ResolvedEndpoint, reason: str):
        self.logger.warning(
            f"{colorize(str(endpoint.method), ANSI_RED, self.colors)} "
            f"{endpoint.full_path} is not a valid endpoint: {reason}"
        )

    def request_matched(self, method: str, path: str, endpoint: ResolvedEndpoint):
        self.logger.info(
            f"{self._method(method)} {colorize(path, ANSI_BLUE, self.colors)} "
            f"{colorize(f'({endpoint.source_id})', ANSI_GRAY, self.colors)}"
        )

    def request_delayed(self, method: str, path: str, delay_ms: int):
        self.logger.debug(f"Delaying {method} {path} by {delay_ms}ms")

    def request_completed(self, event: RequestEvent):
        status = colorize(str(event.status), status_color(event.status), self.colors)
        self.logger.info(f"  → {status} ({event.duration_ms:.0f}ms)")

    def request_unmatched(self, event: RequestEvent):
        self.logger.info(
            f"{colorize(str(event.status), ANSI_RED, self.colors)} "
            f"{self._method(event.method)} {colorize(event.path, ANSI_BLUE, self.colors)} "
            f"{colorize('(no mock found)', ANSI_GRAY, self.colors)}"
        )
