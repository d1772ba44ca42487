"""
=============================================================================
HTTP RESPONSE MODEL AND SERIALIZER
=============================================================================

Holds a response while it moves through the pipeline and renders it into
the exact bytes written to the socket.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.1 200 OK\r\n                 ← version, code, message        │
    │  Content-Type: text/plain\r\n        ← one line per header           │
    │  Content-Encoding: gzip\r\n                                          │
    │  Content-Length: 23\r\n              ← always set by finalization    │
    │  \r\n                                ← blank line                    │
    │  <23 bytes of gzip data>             ← active body, no framing       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TWO BODY REPRESENTATIONS
=============================================================================

A response has a textual body (body) and an encoded body (encoded_body).
Exactly one of them is active, selected by is_encoded:

    is_encoded = False  →  payload = body.encode("utf-8")
    is_encoded = True   →  payload = encoded_body

Handlers only ever set the textual body. The encoding negotiator is the
only stage that switches a response over to its encoded form.

=============================================================================
THE PIPELINE
=============================================================================

Each stage takes a response value and returns an updated copy:

    draft ──► handler ──► negotiate_encoding ──► finalize_content_length
                                                          │
                                                          ▼
                                                     to_bytes()

Later stages can still override what earlier ones set (a handler may turn
the route's default 200 into a 404), but nobody mutates a response another
stage is holding.

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Status code and message are independent fields so a handler can send
    "404 User-Agent header not found" as well as "404 Not Found".
    """

    version: str = "HTTP/1.1"
    status_code: int = HTTPStatus.OK
    status_msg: str = HTTPStatus.OK.phrase
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    encoded_body: bytes = b""
    is_encoded: bool = False

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 201 Created"
        """
        return f"{self.version} {int(self.status_code)} {self.status_msg}"

    @property
    def payload(self) -> bytes:
        """The body bytes that will actually be transmitted."""
        if self.is_encoded:
            return self.encoded_body
        return self.body.encode("utf-8")

    # =========================================================================
    # PIPELINE HELPERS - each returns a new response
    # =========================================================================

    def with_status(self, status_code: int, status_msg: Optional[str] = None) -> "HTTPResponse":
        """
        Return a copy with a different status.

        Without an explicit message the standard reason phrase is used.
        """
        if status_msg is None:
            status_msg = HTTPStatus(status_code).phrase
        return replace(self, status_code=status_code, status_msg=status_msg)

    def with_header(self, name: str, value: str) -> "HTTPResponse":
        """Return a copy with one header added or overwritten."""
        headers = dict(self.headers)
        headers[name] = str(value)
        return replace(self, headers=headers)

    def with_body(self, body: str) -> "HTTPResponse":
        """Return a copy carrying a textual body."""
        return replace(self, body=body, encoded_body=b"", is_encoded=False)

    def with_encoded_body(self, data: bytes) -> "HTTPResponse":
        """Return a copy whose active body is the given encoded bytes."""
        return replace(self, encoded_body=data, is_encoded=True)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\\r\\n            ← Status line
            Content-Type: text/plain\\r\\n   ← Headers, in dict order
            Content-Length: 5\\r\\n
            \\r\\n                           ← Empty line (separator)
            hello                          ← Active body bytes

        Nothing is added here: Content-Length comes from
        finalize_content_length(), which the server always runs first.
        Header order is not part of the contract.

        =====================================================================
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        head = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return head + self.payload


def draft_response(version: str, status: HTTPStatus = HTTPStatus.OK) -> HTTPResponse:
    """
    Create the default response a route starts from.

    The response echoes the request's version token unchanged.
    """
    return HTTPResponse(version=version, status_code=status, status_msg=status.phrase)


def finalize_content_length(response: HTTPResponse) -> HTTPResponse:
    """
    Set Content-Length to the size of the active body.

    Runs on every response after encoding negotiation, including empty
    ones ("Content-Length: 0"), so the declared length always matches the
    bytes on the wire.
    """
    return response.with_header("Content-Length", str(len(response.payload)))


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. HTTPResponse: version, status code + message, headers, text or
#    encoded body
# 2. with_*(): copy-on-write helpers used by each pipeline stage
# 3. finalize_content_length(): the last stage before serialization
# 4. to_bytes(): status line, headers, blank line, payload
# =============================================================================
