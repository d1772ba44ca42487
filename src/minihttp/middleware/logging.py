"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one line per handled request to the "minihttp.access" logger:

    127.0.0.1 - - [18/Oct/2026:21:43:02 +0000] "GET /echo/abc HTTP/1.1" 200 23 0.41ms

    ─────┬─────        ────────┬────────────   ──────────┬─────────── ─┬─ ┬─ ──┬──
         │                     │                         │             │  │    │
      client              timestamp                 request line   status │ duration
                                                                     body bytes

The logger is namespaced so it can be routed on its own:

    logging.getLogger("minihttp.access").addHandler(file_handler)

Requests that fail to parse never reach the pipeline, so they are not
access-logged; the server logs them as warnings instead.

=============================================================================
"""

import time
import logging
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """
    Structured log entry for a request.

    content_length is the size of the body as it will be sent, i.e. the
    compressed size when the response was encoded.
    """

    method: str
    path: str
    version: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Format in the spirit of the Apache common log format."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.version}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Logging middleware should be FIRST in the pipeline so it times the
    whole request and sees the final response:

        pipeline.add(LoggingMiddleware())      # FIRST
        pipeline.add(CompressionMiddleware())
    """

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            # Log and re-raise; the server decides what happens next
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_entry = RequestLog(
            method=str(request.method),
            path=request.path,
            version=request.version,
            client_ip=request.client_address[0],
            status_code=int(response.status_code),
            content_length=len(response.payload),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        logger.log(self.log_level, log_entry.to_text())

        return response
