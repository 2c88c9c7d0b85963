"""
FakeEnd Route Matcher

Route table for the mock server: compiles endpoint path patterns and finds
the endpoint serving an incoming request.

Pattern syntax:
- /users        literal segments, matched exactly (case-sensitive)
- /users/:id    named parameter, matches one non-empty segment; the bound
                value is percent-decoded
"""

import re
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field
from urllib.parse import unquote

from ..common import HttpMethod
from ..loader import ResolvedEndpoint

PARAM_SEGMENT = re.compile(r'^:(\w+)$')


def _split_path(path: str) -> List[str]:
    # One trailing slash is ignored on both patterns and requests
    if path.endswith('/'):
        path = path[:-1]
    return path.split('/')


class RoutePattern:
    """
    Compiled route pattern.

    Example:
        pattern = RoutePattern('/users/:id')
        pattern.match('/users/42')   # {'id': '42'}
        pattern.match('/users')      # None
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.param_names: List[str] = []
        # (literal, None) or (None, param name) per segment
        self.segments: List[Tuple[Optional[str], Optional[str]]] = []

        for segment in _split_path(pattern):
            param = PARAM_SEGMENT.match(segment)
            if param:
                self.param_names.append(param.group(1))
                self.segments.append((None, param.group(1)))
            else:
                self.segments.append((segment, None))

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a request path against the pattern.

        The path is split on '/' before each segment is percent-decoded, so
        an encoded slash ('%2F') stays inside a single parameter.

        Args:
            path: Request path (no query string), as sent by the client

        Returns:
            Bound path parameters, or None if the path doesn't match
        """
        request_segments = _split_path(path)
        if len(request_segments) != len(self.segments):
            return None

        params = {}
        for (literal, name), raw in zip(self.segments, request_segments):
            value = unquote(raw)
            if name is None:
                if value != literal:
                    return None
            elif not raw:
                return None
            else:
                # A repeated name binds its last occurrence
                params[name] = value
        return params

    def __repr__(self) -> str:
        return f"RoutePattern({self.pattern!r})"


@dataclass
class MatchResult:
    """Result of matching a request."""

    matched: bool
    endpoint: Optional[ResolvedEndpoint] = None
    params: Dict[str, str] = field(default_factory=dict)
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'matched': self.matched,
            'reason': self.reason,
            'params': dict(self.params),
            'full_path': self.endpoint.full_path if self.endpoint else None,
            'source': self.endpoint.source_id if self.endpoint else None
        }


class RouteTable:
    """
    Routes keyed by (method, full path).

    Registering the same method and pattern twice keeps only the later
    endpoint, at the later registration position. Lookup returns the first
    route, in registration order, whose pattern matches.

    Example:
        table = RouteTable()
        for endpoint in endpoints:
            table.register(endpoint)

        result = table.match('GET', '/users/42')
        if result.matched:
            print(result.endpoint.source_id, result.params)
    """

    def __init__(self):
        self._routes: Dict[Tuple[HttpMethod, str], Tuple[RoutePattern, ResolvedEndpoint]] = {}

    def register(self, endpoint: ResolvedEndpoint) -> bool:
        """
        Register an endpoint.

        Args:
            endpoint: Resolved endpoint to serve

        Returns:
            False if the endpoint's method is not routable (nothing registered)
        """
        method = HttpMethod.parse(endpoint.method)
        if method is None:
            return False

        key = (method, endpoint.full_path)
        # Pop first so the replacement moves to the end of the table
        self._routes.pop(key, None)
        self._routes[key] = (RoutePattern(endpoint.full_path), endpoint)
        return True

    def match(self, method: str, path: str) -> MatchResult:
        """
        Find the endpoint serving a request.

        Args:
            method: Request method
            path: Request path, percent-encoded as received

        Returns:
            MatchResult with the endpoint and bound path parameters
        """
        request_method = HttpMethod.parse(method)
        if request_method is None:
            return MatchResult(matched=False, reason=f"Unsupported method {method}")

        for (route_method, _), (pattern, endpoint) in self._routes.items():
            if route_method is not request_method:
                continue
            params = pattern.match(path)
            if params is not None:
                return MatchResult(
                    matched=True,
                    endpoint=endpoint,
                    params=params,
                    reason=f"Matched {endpoint.full_path}"
                )

        return MatchResult(matched=False, reason="No route matches")

    @property
    def endpoints(self) -> List[ResolvedEndpoint]:
        """Registered endpoints in match order."""
        return [endpoint for _, endpoint in self._routes.values()]

    def __len__(self) -> int:
        return len(self._routes)
