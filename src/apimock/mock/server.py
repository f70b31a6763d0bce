"""
apimock Mock Server

FastAPI-based HTTP server that answers requests from JSON files on disk.

Features:
- URL path to mock file resolution with wildcard segments
- Descriptor files (method filter, status, delay, headers, body)
- Simple mode for plain JSON files
- {path.N} placeholders filled from the request path
- Permissive CORS and OPTIONS preflight handling
"""

from __future__ import annotations  # Enable forward references for type hints

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
import uvicorn

from .matcher import PathMatcher, MatchResult
from .generator import (
    MockDescriptor,
    OpaqueJSON,
    parse_mock_file,
    JSON_CONTENT_TYPE,
    RAW_CONTENT_TYPE
)
from ..common import describe_mock_directory

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

LIVENESS_MESSAGE = "apimock server is running!"

# RFC 9110 token characters
HEADER_NAME_PATTERN = re.compile(r"[!#$%&'*+.^_`|~0-9A-Za-z-]+")

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': '*',
    'Access-Control-Allow-Headers': '*'
}


@dataclass
class MockConfig:
    """Configuration for mock server behavior."""

    mock_dir: str = "mock"
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "info"
    access_log: bool = True


class MockServer:
    """
    FastAPI-based mock server for serving JSON files from a directory.

    Every request walks the mock directory, picks the most specific matching
    file and renders it. Nothing is cached and no per-request state is kept
    on the server object, so concurrent requests never see each other's
    captured path values.

    Example:
        server = MockServer(MockConfig(mock_dir='mock', port=8080))
        server.start()
    """

    def __init__(
        self,
        config: Optional[MockConfig] = None,
        path_matcher: Optional[PathMatcher] = None
    ):
        """
        Initialize mock server.

        Args:
            config: Optional MockConfig for server behavior
            path_matcher: Optional PathMatcher instance (will create if None)
        """
        self.config = config or MockConfig()
        self.mock_dir = Path(self.config.mock_dir)

        self.logger = logging.getLogger("apimock.mock")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.matcher = path_matcher or PathMatcher(str(self.mock_dir))

        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with the catch-all mock route."""
        app = FastAPI(
            title="apimock",
            description="Local mock API server backed by JSON files",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        @app.api_route("/{path:path}", methods=HTTP_METHODS)
        async def mock_request(request: Request, path: str):
            """Handle incoming requests and serve mock responses."""
            return await self._handle_request(request, path)

        return app

    async def _handle_request(self, request: Request, path: str) -> Response:
        """
        Handle incoming request and serve mock response.

        Args:
            request: FastAPI Request object
            path: Request path without the leading "/"

        Returns:
            FastAPI Response
        """
        method = request.method

        if not path:
            return Response(
                content=LIVENESS_MESSAGE,
                status_code=200,
                headers={'Content-Type': 'text/plain; charset=utf-8'}
            )

        headers = dict(CORS_HEADERS)

        if method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        self.logger.debug(f"Incoming: {method} /{path}")

        match_result = await run_in_threadpool(self.matcher.find_match, path)

        if not match_result.matched:
            self.logger.warning(f"No mock file found for {method} /{path}")
            return self._json_response(404, {"error": "Not Found"}, headers)

        try:
            raw = await run_in_threadpool(match_result.file_path.read_bytes)
        except OSError as e:
            self.logger.error(f"Failed to read {match_result.file_path}: {e}")
            return self._json_response(500, {"error": "Server Error"}, headers)

        response = await self._create_response(raw, method, match_result, headers)
        self.logger.debug(
            f"{method} /{path} -> {match_result.file_path} ({response.status_code})"
        )
        return response

    async def _create_response(
        self,
        raw: bytes,
        method: str,
        match_result: MatchResult,
        headers: Dict[str, str]
    ) -> Response:
        """
        Create FastAPI Response from mock file content.

        Args:
            raw: Mock file bytes
            method: Request method
            match_result: Path match carrying the captured path values
            headers: Headers already set on the response (CORS)

        Returns:
            FastAPI Response object
        """
        mock = parse_mock_file(raw)

        if isinstance(mock, OpaqueJSON):
            _set_header(headers, 'Content-Type', RAW_CONTENT_TYPE)
            return Response(content=mock.raw, status_code=200, headers=headers)

        if not mock.allows(method):
            allow = ", ".join(mock.methods)
            _set_header(headers, 'Allow', _wire_value(allow))
            return self._json_response(
                405,
                {"error": "Method Not Allowed", "allow": allow},
                headers
            )

        await self._apply_delay(mock)

        generated = mock.render(match_result.params)

        for name, value in generated['resp_headers'].items():
            if not HEADER_NAME_PATTERN.fullmatch(name):
                self.logger.warning(f"Dropping invalid header name {name!r} from {match_result.file_path}")
                continue
            _set_header(headers, name, _wire_value(value))

        if generated['content_type']:
            _set_header(headers, 'Content-Type', generated['content_type'])

        return Response(
            content=generated['resp_body'],
            status_code=generated['status'],
            headers=headers
        )

    async def _apply_delay(self, mock: MockDescriptor):
        """Suspend this request for the descriptor's delay."""
        if mock.delay_ms > 0:
            await asyncio.sleep(mock.delay_ms / 1000)

    def _json_response(self, status: int, payload: Dict[str, Any], headers: Dict[str, str]) -> Response:
        _set_header(headers, 'Content-Type', JSON_CONTENT_TYPE)
        return Response(
            content=json.dumps(payload),
            status_code=status,
            headers=headers
        )

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None
    ):
        """
        Start the mock server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print(f"[apimock] Starting -> http://{actual_host}:{actual_port}")
        print(f"   Mock directory: {self.mock_dir}")
        for line in describe_mock_directory(self.mock_dir):
            print(f"   {line}")
        print("   Press Ctrl+C to stop")
        print()

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


def _set_header(headers: Dict[str, str], name: str, value: str):
    """Set a header, replacing any existing one whose name differs only in case."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def _wire_value(value: str) -> str:
    """
    Prepare a header value for the wire.

    Starlette encodes header values as latin-1, so the UTF-8 bytes are passed
    through one latin-1 character per byte. CR, LF and NUL become spaces.
    """
    for char in ('\r', '\n', '\0'):
        value = value.replace(char, ' ')
    return value.encode('utf-8').decode('latin-1')


def create_mock_server(
    mock_dir: str = "mock",
    host: str = "127.0.0.1",
    port: int = 8080,
    log_level: str = "info"
) -> MockServer:
    """
    Convenience function to create and configure a mock server.

    Args:
        mock_dir: Directory holding the mock JSON files
        host: Host to bind to
        port: Port to bind to
        log_level: Logging level for apimock and uvicorn

    Returns:
        Configured MockServer instance
    """
    config = MockConfig(
        mock_dir=mock_dir,
        host=host,
        port=port,
        log_level=log_level
    )

    return MockServer(config=config)
