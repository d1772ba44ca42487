"""
=============================================================================
CONTENT TYPES AND CONTENT CODINGS
=============================================================================

Closed vocabularies for the two header values the server writes itself:

    Content-Type      →  ContentType      (text/plain, application/octet-stream)
    Content-Encoding  →  EncodingScheme   (gzip)

=============================================================================
WHY TWO DIFFERENT "UNKNOWN TOKEN" RULES?
=============================================================================

Both enums map to and from a wire string, but they treat unknown input
differently on purpose:

    ┌──────────────────────┬─────────────────────────────────────────────┐
    │ Request method       │ Unknown token → HTTPParseError              │
    │ (see request.py)     │ "PATCH /echo/x HTTP/1.1" never gets routed  │
    ├──────────────────────┼─────────────────────────────────────────────┤
    │ Accept-Encoding item │ Unknown token → ignored (None)              │
    │ (EncodingScheme)     │ "br, zstd, gzip" still negotiates gzip      │
    └──────────────────────┴─────────────────────────────────────────────┘

A client advertising an encoding we do not speak is perfectly normal;
a client using a method we do not speak is not.

=============================================================================
"""

from enum import Enum
from typing import Optional


class ContentType(Enum):
    """
    MIME types the built-in routes produce.

    text/plain                → echo and user-agent bodies
    application/octet-stream  → file contents ("I don't know what this is")
    """

    TEXT_PLAIN = "text/plain"
    OCTET_STREAM = "application/octet-stream"

    def __str__(self) -> str:
        return self.value


class EncodingScheme(Enum):
    """
    Content codings the server can apply to a response body.

    Only gzip (DEFLATE + gzip framing) is supported. The enum value is the
    token as it appears in Accept-Encoding and Content-Encoding.
    """

    GZIP = "gzip"

    @classmethod
    def from_token(cls, token: str) -> Optional["EncodingScheme"]:
        """
        Look up an Accept-Encoding token.

        Exact string match only: "gzip" matches, "GZIP" and "gzip;q=1.0"
        do not. Unknown tokens return None instead of raising.
        """
        return _ENCODINGS_BY_TOKEN.get(token)

    def __str__(self) -> str:
        return self.value


_ENCODINGS_BY_TOKEN = {scheme.value: scheme for scheme in EncodingScheme}
