"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads an HTTP/1.1 request straight off a byte stream and turns it into an
HTTPRequest. The parser is streaming: it pulls one line at a time with
readline() and then exactly Content-Length body bytes with read(n), so it
works on a socket file object as well as on io.BytesIO in tests.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  POST /files/notes.txt HTTP/1.1\r\n       ← request line (3 tokens)  │
    │  Host: localhost:4221\r\n                 ← headers, "Name: Value"   │
    │  Content-Length: 5\r\n                                               │
    │  \r\n                                     ← blank line ends headers  │
    │  hello                                    ← exactly 5 body bytes     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PARSING RULES
=============================================================================

1. REQUEST LINE
   - Terminated by \n, a preceding \r is tolerated
   - Split on whitespace; exactly 3 tokens or "invalid request line"
   - Method must be GET, POST, PUT or DELETE or "invalid HTTP method"
   - Path and version are kept verbatim (no query split, no decoding)

2. HEADERS
   - One per line until the blank line (or end of stream)
   - Split on the FIRST colon: "Host: a:b" → ("Host", "a:b")
   - Lines without a colon are silently dropped
   - Names keep their case; a repeated name overwrites the earlier value

3. BODY
   - Only when Content-Length is present; read exactly that many bytes
   - Content-Length must be a plain non-negative integer
   - A short read or a body that is not valid UTF-8 text is a failure
   - No Content-Length → body is None (not "")

=============================================================================
HEADER CASE
=============================================================================

Header names are NOT normalized. Downstream code looks up "User-Agent",
"Content-Length" and "Accept-Encoding" with exactly that capitalization,
which is what common clients send. A client sending "user-agent" will not
be recognized unless the parser is built with canonicalize_headers=True,
which rewrites every name into Dash-Title-Case first.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Optional
import io


class HTTPParseError(Exception):
    """
    Raised when a request cannot be parsed.

    Parse errors are fatal to the single connection that produced them:
    the server logs the message and closes the socket without answering.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class HTTPMethod(Enum):
    """
    The request methods this server understands.

    Anything else on the request line is a parse failure, never a variant:

        >>> HTTPMethod.from_token("POST")
        <HTTPMethod.POST: 'POST'>
        >>> HTTPMethod.from_token("PATCH")
        Traceback (most recent call last):
        ...
        HTTPParseError: invalid HTTP method
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def from_token(cls, token: str) -> "HTTPMethod":
        try:
            return _METHODS_BY_TOKEN[token]
        except KeyError:
            raise HTTPParseError("invalid HTTP method") from None

    def __str__(self) -> str:
        return self.value


_METHODS_BY_TOKEN = {method.value: method for method in HTTPMethod}


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         HTTPMethod enum member
        path:           Raw request target, e.g. "/echo/hello%20world"
        version:        Version token, echoed back in the status line
        headers:        Header name → value, exact-case keys
        body:           Decoded body text, or None without Content-Length
        client_address: (ip, port) of the peer, for logging

    =========================================================================
    """

    method: HTTPMethod
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    client_address: tuple[str, int] = ("", 0)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a header value by its exact name.

        Lookups are case-sensitive: get_header("user-agent") does not find
        a "User-Agent" header.
        """
        return self.headers.get(name, default)

    @property
    def user_agent(self) -> Optional[str]:
        return self.get_header("User-Agent")

    @property
    def accept_encoding(self) -> Optional[str]:
        return self.get_header("Accept-Encoding")

    @property
    def content_length(self) -> Optional[str]:
        """Raw Content-Length header value, as received."""
        return self.get_header("Content-Length")


def canonical_header_name(name: str) -> str:
    """
    Rewrite a header name into Dash-Title-Case.

        >>> canonical_header_name("user-agent")
        'User-Agent'
        >>> canonical_header_name("ACCEPT-ENCODING")
        'Accept-Encoding'
    """
    return "-".join(part.capitalize() for part in name.split("-"))


class RequestParser:
    """
    Parses an HTTP request from a binary stream.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        stream.readline()  ──►  request line  ──►  method, path, version
              │
              ▼
        stream.readline()  ──►  header lines  ──►  {name: value}
           (until blank)
              │
              ▼
        stream.read(n)     ──►  body bytes    ──►  UTF-8 text or failure
        (n = Content-Length)

    ==========================================================================
    USAGE
    ==========================================================================

        parser = RequestParser()

        # From a socket
        with sock.makefile("rb") as stream:
            request = parser.parse(stream, address)

        # From bytes (tests)
        request = parser.parse(io.BytesIO(b"GET / HTTP/1.1\\r\\n\\r\\n"))

    ==========================================================================
    """

    HEADER_SEPARATOR = ":"

    def __init__(
        self,
        max_body_size: int = 10 * 1024 * 1024,
        canonicalize_headers: bool = False,
    ):
        """
        Args:
            max_body_size: Largest Content-Length accepted, in bytes.
                           Bigger declarations are rejected before any
                           body byte is read.
            canonicalize_headers: Rewrite header names to Dash-Title-Case
                                  so differently cased clients are still
                                  recognized. Off by default.
        """
        self.max_body_size = max_body_size
        self.canonicalize_headers = canonicalize_headers

    def parse(
        self,
        stream: BinaryIO,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Read one request from the stream.

        Args:
            stream: Binary stream with readline() and read(n).
            client_address: Peer (ip, port), stored on the request.

        Returns:
            The fully populated HTTPRequest.

        Raises:
            HTTPParseError: If any part of the request is malformed.
        """
        # =====================================================================
        # STEP 1: Request line
        # =====================================================================
        method, path, version = self._parse_request_line(self._read_line(stream))

        # =====================================================================
        # STEP 2: Headers, up to the blank line or end of stream
        # =====================================================================
        request = HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=self._parse_headers(stream),
            client_address=client_address,
        )

        # =====================================================================
        # STEP 3: Body, only when Content-Length was sent
        # =====================================================================
        if request.content_length is not None:
            request.body = self._read_body(stream, request.content_length)

        return request

    def _read_line(self, stream: BinaryIO) -> Optional[str]:
        """
        Read one line, without its line terminator.

        Returns None at end of stream.
        """
        raw = stream.readline()
        if not raw:
            return None

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPParseError("invalid request encoding") from None

        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line

    def _parse_request_line(self, line: Optional[str]) -> tuple[HTTPMethod, str, str]:
        """
        Parse "METHOD SP PATH SP VERSION".

        Splitting on any whitespace means "GET  /  HTTP/1.1" is accepted,
        while "GET /" and "GET / HTTP/1.1 extra" are not.
        """
        tokens = line.split() if line is not None else []
        if len(tokens) != 3:
            raise HTTPParseError("invalid request line")

        method_token, path, version = tokens
        return HTTPMethod.from_token(method_token), path, version

    def _parse_headers(self, stream: BinaryIO) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        while True:
            line = self._read_line(stream)
            if not line:
                # Blank line or end of stream
                break

            name, sep, value = line.partition(self.HEADER_SEPARATOR)
            if not sep:
                continue

            name = name.strip()
            if self.canonicalize_headers:
                name = canonical_header_name(name)

            # Last write wins
            headers[name] = value.strip()

        return headers

    def _read_body(self, stream: BinaryIO, content_length: str) -> str:
        # int() alone would accept "+5", " 5" and "-0"
        if not (content_length.isascii() and content_length.isdigit()):
            raise HTTPParseError("invalid Content-Length")

        length = int(content_length)
        if length > self.max_body_size:
            raise HTTPParseError("Content-Length exceeds limit")

        data = stream.read(length) if length else b""
        if len(data) != length:
            raise HTTPParseError(
                f"truncated request body: expected {length} bytes, got {len(data)}"
            )

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPParseError("request body is not valid text") from None


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    **parser_options,
) -> HTTPRequest:
    """
    Parse a complete request held in memory.

    Wraps the bytes in io.BytesIO and runs a one-off RequestParser.
    """
    parser = RequestParser(**parser_options)
    return parser.parse(io.BytesIO(data), client_address)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. HTTPMethod: closed enum, unknown tokens fail the parse
# 2. HTTPRequest: method, raw path, version, exact-case headers, optional body
# 3. RequestParser: line-at-a-time reader with Content-Length framing
# 4. parse_request(): bytes in, HTTPRequest out
#
# Every malformed request surfaces as an HTTPParseError.
# =============================================================================
