"""
FakeEnd Mock Server Module

Mock HTTP server functionality for serving YAML-defined endpoints.

This module provides:
- FastAPI-based mock server
- Route table with named path parameters
- Response template rendering
- Request observers for tracing
"""

from .server import MockServer, MockConfig, create_mock_server, not_found_body
from .matcher import RouteTable, RoutePattern, MatchResult
from .generator import (
    RequestContext,
    render_template,
    interpolate,
    extract_request_context,
    parse_body_fields,
    flatten_query
)
from .observer import RequestObserver, RequestEvent, LoggingObserver

__all__ = [
    # Server
    'MockServer',
    'MockConfig',
    'create_mock_server',
    'not_found_body',

    # Matcher
    'RouteTable',
    'RoutePattern',
    'MatchResult',

    # Generator
    'RequestContext',
    'render_template',
    'interpolate',
    'extract_request_context',
    'parse_body_fields',
    'flatten_query',

    # Observer
    'RequestObserver',
    'RequestEvent',
    'LoggingObserver',
]
