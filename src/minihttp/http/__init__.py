"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that knows what HTTP/1.1 looks like on the wire, and nothing
that knows about sockets:

    request.py        Streaming request parser, HTTPRequest, HTTPMethod
    response.py       HTTPResponse, Content-Length finalization, serializer
    router.py         Ordered prefix router
    status_codes.py   HTTPStatus enum with reason phrases
    content_types.py  ContentType and EncodingScheme enums

=============================================================================
"""

from .request import (
    HTTPRequest,
    HTTPMethod,
    HTTPParseError,
    RequestParser,
    parse_request,
)
from .response import HTTPResponse, draft_response, finalize_content_length
from .router import Router, Route, Handler
from .status_codes import HTTPStatus
from .content_types import ContentType, EncodingScheme

__all__ = [
    # Request parsing
    "HTTPRequest",
    "HTTPMethod",
    "HTTPParseError",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "draft_response",
    "finalize_content_length",

    # Routing
    "Router",
    "Route",
    "Handler",

    # Vocabularies
    "HTTPStatus",
    "ContentType",
    "EncodingScheme",
]
