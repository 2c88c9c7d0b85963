"""
FakeEnd Mock Server

FastAPI-based HTTP mock server that serves responses from YAML endpoint
definitions.

Features:
- Route patterns with named path parameters (/users/:id)
- Response templates filled from path, query and body values
- Per-endpoint artificial delays that don't block other requests
- JSON 404 envelope for requests no definition matches
"""

from __future__ import annotations  # Enable forward references for type hints

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

try:
    from fastapi import FastAPI, Request, Response
    from fastapi.encoders import jsonable_encoder
    from fastapi.responses import JSONResponse
    import uvicorn
    FASTAPI_AVAILABLE = True
except ImportError:
    FASTAPI_AVAILABLE = False

from ..common import JSONValue
from ..loader import ResolvedEndpoint, load_endpoints
from .matcher import RouteTable
from .generator import extract_request_context, render_template
from .observer import RequestObserver, RequestEvent, LoggingObserver

NOT_FOUND_STATUS = 404
NOT_FOUND_ERROR = "Mock endpoint not found"
NOT_FOUND_MESSAGE = "No mock endpoint matches this request. Check your YAML files."

# Statuses whose responses must not carry a body
BODYLESS_STATUSES = {204, 304}

SERVED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    # Server options
    host: str = "127.0.0.1"
    port: int = 4000
    log_level: str = "info"
    access_log: bool = False  # uvicorn access log; request traces go through the observer

    # Console output
    colors: bool = True  # ANSI colors in request traces


def not_found_body(method: str, path: str) -> Dict[str, Any]:
    """Error envelope for requests that match no endpoint."""
    return {
        "error": NOT_FOUND_ERROR,
        "path": path,
        "method": method,
        "message": NOT_FOUND_MESSAGE
    }


def raw_request_path(request: Request) -> str:
    """
    Request path as sent, still percent-encoded, without the query string.

    Route matching splits on '/' before decoding, so an encoded '%2F' stays
    inside one path parameter.
    """
    raw_path = request.scope.get('raw_path')
    if not raw_path:
        return request.url.path
    return raw_path.split(b'?', 1)[0].decode('latin-1')


class MockServer:
    """
    FastAPI-based mock server for serving YAML-defined endpoints.

    The route table is built once, here, and never changes afterwards; each
    request is matched, optionally delayed, rendered and answered on its own.

    Example:
        # Load definitions and start server
        result = load_endpoints('mock_server')
        server = MockServer(result.endpoints)
        server.start(port=4000)

        # Or in one call
        server = create_mock_server('mock_server', port=4000)
        server.start()
    """

    def __init__(
        self,
        endpoints: List[ResolvedEndpoint],
        config: Optional[MockConfig] = None,
        observer: Optional[RequestObserver] = None
    ):
        """
        Initialize mock server.

        Args:
            endpoints: Resolved endpoints, in registration order
            config: Optional MockConfig for server behavior
            observer: Receives request events (default: LoggingObserver)
        """
        if not FASTAPI_AVAILABLE:
            raise ImportError("FastAPI is required for mock server. Install with: pip install fastapi uvicorn")

        self.config = config or MockConfig()
        self.endpoints = list(endpoints)

        self.logger = logging.getLogger("fakeend.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.observer = observer or LoggingObserver(self.logger, colors=self.config.colors)

        self.routes = self._build_routes()
        self.app = self._create_app()

    def _build_routes(self) -> RouteTable:
        """Register every routable endpoint; later duplicates replace earlier ones."""
        routes = RouteTable()
        for endpoint in self.endpoints:
            if not routes.register(endpoint):
                self.observer.endpoint_skipped(endpoint, f"unsupported method {endpoint.method!r}")

        self.logger.debug(f"Registered {len(routes)} routes from {len(self.endpoints)} endpoints")
        return routes

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="FakeEnd Mock Server",
            description="Mock HTTP server serving YAML-defined endpoints",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        # Single catch-all route; the route table does the matching
        @app.api_route("/{path:path}", methods=SERVED_METHODS)
        async def mock_request(request: Request, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self._handle_request(request)

        # Methods outside SERVED_METHODS are rejected by the router with 405
        @app.exception_handler(405)
        async def unserved_method(request: Request, exc: Exception):
            return self._not_found(request.method, request.url.path, time.perf_counter())

        return app

    def _not_found(self, method: str, path: str, start_time: float) -> Response:
        """Build the not-found envelope and report the unmatched request."""
        response = JSONResponse(content=not_found_body(method, path), status_code=NOT_FOUND_STATUS)
        self.observer.request_unmatched(RequestEvent(
            outcome='unmatched',
            method=method,
            path=path,
            status=NOT_FOUND_STATUS,
            duration_ms=(time.perf_counter() - start_time) * 1000
        ))
        return response

    async def _handle_request(self, request: Request) -> Response:
        """
        Handle incoming request and serve mock response.

        Args:
            request: FastAPI Request object

        Returns:
            Rendered endpoint response, or the 404 envelope
        """
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path

        match_result = self.routes.match(method, raw_request_path(request))

        if not match_result.matched:
            return self._not_found(method, path, start_time)

        endpoint = match_result.endpoint
        self.observer.request_matched(method, path, endpoint)

        # Only this request waits; the event loop keeps serving others
        if endpoint.delay_ms > 0:
            self.observer.request_delayed(method, path, endpoint.delay_ms)
            await asyncio.sleep(endpoint.delay_ms / 1000)

        body = await request.body()
        request_context = extract_request_context(
            match_result.params,
            request.query_params.multi_items(),
            request.headers.get('content-type'),
            body
        )
        rendered = render_template(endpoint.body, request_context)

        response = self._create_response(endpoint.status, rendered)

        self.observer.request_completed(RequestEvent(
            outcome='matched',
            method=method,
            path=path,
            status=endpoint.status,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            source_id=endpoint.source_id,
            full_path=endpoint.full_path,
            delay_ms=endpoint.delay_ms
        ))
        return response

    def _create_response(self, status_code: int, body: JSONValue) -> Response:
        """
        Create FastAPI Response for a rendered body.

        Args:
            status_code: Declared status code
            body: Rendered response body

        Returns:
            JSON response, or an empty one for statuses that forbid a body
        """
        if status_code < 200 or status_code in BODYLESS_STATUSES:
            return Response(status_code=status_code)

        # YAML timestamps load as date/datetime objects
        return JSONResponse(content=jsonable_encoder(body), status_code=status_code)

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None
    ):
        """
        Start the mock server (blocking).

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=self.config.access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_mock_server(
    mock_dir: Union[str, Path],
    host: str = "127.0.0.1",
    port: int = 4000,
    log_level: str = "info",
    observer: Optional[RequestObserver] = None
) -> MockServer:
    """
    Convenience function to load a mock directory and create a server.

    Args:
        mock_dir: Directory containing YAML definitions
        host: Host to bind to
        port: Port to bind to
        log_level: Log level (debug, info, warning, error)
        observer: Optional request observer

    Returns:
        Configured MockServer instance

    Raises:
        MockDirectoryNotFound: If mock_dir doesn't exist

    Example:
        server = create_mock_server('mock_server', port=4000)
        server.start()
    """
    config = MockConfig(host=host, port=port, log_level=log_level)
    result = load_endpoints(mock_dir)
    return MockServer(result.endpoints, config=config, observer=observer)
