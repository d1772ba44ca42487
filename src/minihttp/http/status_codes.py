"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can emit, with their reason phrases.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  2xx   │ 200 OK            - Root, echo, user-agent, file read     │
    │        │ 201 Created       - File written by POST /files/{name}    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ 404 Not Found     - Unknown path, missing file/header     │
    │        │ 405 Method Not Allowed - /files with PUT or DELETE        │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Server Error - Filesystem failure            │
    └────────┴───────────────────────────────────────────────────────────┘

A response carries its status code and message separately (see
HTTPResponse), so a handler is free to pair a code with a custom message,
e.g. "404 User-Agent header not found". HTTPStatus only supplies the
default phrase.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.CREATED == 201
        True
        >>> HTTPStatus.CREATED.phrase
        'Created'
    """

    OK = 200
    CREATED = 201

    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 201 Created
                     ─── ───────
                      │     │
                      │     └── Reason phrase
                      └──────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
