"""
Unit tests for the middleware pipeline and the request pipeline of
HTTPServer (no sockets involved).
"""

import gzip
import logging

import pytest

from minihttp import HTTPServer, ServerConfig
from minihttp.http.request import HTTPMethod, HTTPRequest, parse_request
from minihttp.http.response import HTTPResponse
from minihttp.http.router import Router
from minihttp.middleware import (
    LoggingMiddleware,
    Middleware,
    MiddlewarePipeline,
    RequestLog,
)


class RecordingMiddleware(Middleware):
    """Records the order in which layers see the request and response."""

    def __init__(self, label: str, calls: list):
        self.label = label
        self.calls = calls

    def __call__(self, request, next):
        self.calls.append(f"{self.label}:in")
        response = next(request)
        self.calls.append(f"{self.label}:out")
        return response.with_header(f"X-{self.label}", "seen")


@pytest.fixture
def server(files_dir) -> HTTPServer:
    """A server that is never started; requests go straight to handle_request."""
    return HTTPServer(ServerConfig(port=0, directory=str(files_dir)))


class TestMiddlewarePipeline:
    """Tests for MiddlewarePipeline."""

    def test_first_added_is_outermost(self):
        calls = []
        pipeline = MiddlewarePipeline()
        pipeline.add(RecordingMiddleware("A", calls)).add(RecordingMiddleware("B", calls))

        def handler(request):
            calls.append("handler")
            return HTTPResponse()

        response = pipeline.wrap(handler)(HTTPRequest(method=HTTPMethod.GET, path="/"))

        assert calls == ["A:in", "B:in", "handler", "B:out", "A:out"]
        assert response.headers == {"X-B": "seen", "X-A": "seen"}

    def test_empty_pipeline_returns_handler(self):
        pipeline = MiddlewarePipeline()

        def handler(request):
            return HTTPResponse()

        assert pipeline.wrap(handler) is handler
        assert len(pipeline) == 0

    def test_iteration(self):
        first, second = LoggingMiddleware(), LoggingMiddleware()
        pipeline = MiddlewarePipeline().add(first).add(second)

        assert list(pipeline) == [first, second]
        assert first.name == "LoggingMiddleware"


class TestLoggingMiddleware:
    """Tests for the access log."""

    def test_access_line(self, caplog):
        caplog.set_level(logging.INFO, logger="minihttp.access")
        request = HTTPRequest(
            method=HTTPMethod.GET,
            path="/echo/abc",
            client_address=("10.0.0.7", 5555),
        )

        LoggingMiddleware()(request, lambda r: HTTPResponse().with_body("abc"))

        records = [r for r in caplog.records if r.name == "minihttp.access"]
        assert len(records) == 1
        message = records[0].getMessage()
        assert message.startswith("10.0.0.7 - - [")
        assert '"GET /echo/abc HTTP/1.1" 200 3 ' in message

    def test_errors_are_logged_and_reraised(self, caplog):
        caplog.set_level(logging.INFO, logger="minihttp.access")

        def broken(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            LoggingMiddleware()(HTTPRequest(method=HTTPMethod.GET, path="/x"), broken)

        assert any(
            r.levelno == logging.ERROR and "RuntimeError: boom" in r.getMessage()
            for r in caplog.records
        )

    def test_request_log_format(self):
        entry = RequestLog(
            method="POST",
            path="/files/a",
            version="HTTP/1.1",
            client_ip="",
            status_code=201,
            content_length=0,
            duration_ms=1.234,
            timestamp="18/Oct/2026:10:00:00 +0000",
        )
        assert entry.to_text() == (
            '- - - [18/Oct/2026:10:00:00 +0000] "POST /files/a HTTP/1.1" 201 0 1.23ms'
        )


class TestHandleRequest:
    """Tests for HTTPServer.handle_request()."""

    def test_echo_round_trip(self, server: HTTPServer):
        response = server.handle_request(parse_request(b"GET /echo/abc HTTP/1.1\r\n\r\n"))

        head, separator, body = response.to_bytes().partition(b"\r\n\r\n")
        status_line, *header_lines = head.split(b"\r\n")

        assert separator == b"\r\n\r\n"
        assert status_line == b"HTTP/1.1 200 OK"
        assert sorted(header_lines) == [b"Content-Length: 3", b"Content-Type: text/plain"]
        assert body == b"abc"

    def test_gzip_then_finalize(self, server: HTTPServer):
        raw = b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"
        response = server.handle_request(parse_request(raw))

        assert response.headers["Content-Encoding"] == "gzip"
        assert response.headers["Content-Length"] == str(len(response.payload))
        assert gzip.decompress(response.payload) == b"abc"

    def test_not_found_has_content_length(self, server: HTTPServer):
        response = server.handle_request(parse_request(b"GET /nope HTTP/1.1\r\n\r\n"))
        assert response.to_bytes() == b"HTTP/1.1 404 Not Found\r\nContent-Length: 0\r\n\r\n"

    def test_use_adds_inner_middleware(self, server: HTTPServer):
        calls = []
        server.use(RecordingMiddleware("Custom", calls))

        raw = b"GET /echo/abc HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"
        response = server.handle_request(parse_request(raw))

        assert calls == ["Custom:in", "Custom:out"]
        assert response.headers["X-Custom"] == "seen"
        # Compression still wraps the custom layer
        assert gzip.decompress(response.payload) == b"abc"

    def test_custom_router(self):
        router = Router()
        router.add_route("/ping", lambda request, draft: draft.with_body("pong"))
        server = HTTPServer(ServerConfig(port=0), router=router)

        response = server.handle_request(parse_request(b"GET /ping HTTP/1.1\r\n\r\n"))
        assert response.body == "pong"
        assert server.router is router
