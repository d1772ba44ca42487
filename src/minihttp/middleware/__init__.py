"""
=============================================================================
MIDDLEWARE
=============================================================================

    base.py          Middleware ABC, MiddlewarePipeline (chain of
                     responsibility around the router)
    compression.py   Accept-Encoding negotiation, gzip
    logging.py       Access log on the "minihttp.access" logger

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .compression import CompressionMiddleware, negotiate_encoding, select_encoding
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Built-in middleware
    "CompressionMiddleware",
    "LoggingMiddleware",
    "RequestLog",

    # Negotiation helpers
    "negotiate_encoding",
    "select_encoding",
]
