"""
=============================================================================
ENCODING NEGOTIATION (COMPRESSION)
=============================================================================

Compresses the response body with gzip when the client says it can take
it, after routing and before Content-Length is finalized.

=============================================================================
CONTENT NEGOTIATION
=============================================================================

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /echo/abc HTTP/1.1                                        │
    │ Accept-Encoding: br, gzip                                     │
    │                  │    │                                       │
    │                  │    └── supported → use it                  │
    │                  └── unknown → ignored, no error              │
    └───────────────────────────────────────────────────────────────┘

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK                                               │
    │ Content-Type: text/plain                                      │
    │ Content-Encoding: gzip                                        │
    │ Content-Length: 23      (compressed size, set later)          │
    │                                                               │
    │ [gzip compressed body]                                        │
    └───────────────────────────────────────────────────────────────┘

=============================================================================
RULES
=============================================================================

1. The header is read with its exact name, "Accept-Encoding".
2. Its value is split on commas and each token is trimmed.
3. Tokens match EncodingScheme values exactly. "gzip;q=0.5" or "GZIP"
   are not gzip; "*" and "identity" mean nothing special.
4. When gzip is acceptable the body is ALWAYS compressed: no minimum size,
   no content-type filter, and the compressed form is used even when it
   comes out larger than the original (it does for short bodies).
5. gzip runs at the library default compression level.

=============================================================================
"""

import gzip
from typing import Optional

from .base import Middleware, NextHandler
from ..http.content_types import EncodingScheme
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


def select_encoding(accept_encoding: Optional[str]) -> Optional[EncodingScheme]:
    """
    Pick a supported scheme from an Accept-Encoding value.

        >>> select_encoding("deflate, gzip")
        <EncodingScheme.GZIP: 'gzip'>
        >>> select_encoding("br") is None
        True
    """
    if accept_encoding is None:
        return None

    for token in accept_encoding.split(","):
        scheme = EncodingScheme.from_token(token.strip())
        if scheme is not None:
            return scheme
    return None


def encode_body(scheme: EncodingScheme, data: bytes) -> bytes:
    """Apply a content coding to raw body bytes."""
    if scheme is EncodingScheme.GZIP:
        return gzip.compress(data)
    raise ValueError(f"Unsupported encoding scheme: {scheme}")


def negotiate_encoding(request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
    """
    Encode the response body if the request allows it.

    Returns the response unchanged when Accept-Encoding is absent or lists
    nothing supported; otherwise returns a copy whose active body is the
    encoded bytes and which carries a Content-Encoding header.
    """
    scheme = select_encoding(request.accept_encoding)
    if scheme is None:
        return response

    encoded = encode_body(scheme, response.body.encode("utf-8"))
    return (response
        .with_encoded_body(encoded)
        .with_header("Content-Encoding", str(scheme)))


class CompressionMiddleware(Middleware):
    """
    Response compression middleware.

    =========================================================================
    MIDDLEWARE POSITION
    =========================================================================

    Compression should be LAST in the pipeline, right next to the router:

        pipeline.add(LoggingMiddleware())
        pipeline.add(CompressionMiddleware())

    so outer middleware sees the final, encoded response.

    =========================================================================
    """

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)
        return negotiate_encoding(request, response)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. select_encoding(): comma-split, trim, exact token match, unknowns skipped
# 2. negotiate_encoding(): gzip the body, flag it encoded, add Content-Encoding
# 3. CompressionMiddleware: runs negotiation on the way out of the pipeline
# =============================================================================
