"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under a single base directory.

    GET  /files/{name}   → 200 + file contents (application/octet-stream)
    POST /files/{name}   → 201, request body written to the file
    PUT/DELETE           → 405 Method Not Allowed

=============================================================================
PATH RESOLUTION
=============================================================================

The file path is plain string concatenation:

    directory = "/tmp/data"
    request   = GET /files/notes.txt
    target    = "/tmp/data/notes.txt"

There is NO path traversal check. "/files/../etc/passwd" resolves to
"/tmp/data/../etc/passwd" and is served if readable. Put the server behind
something that filters paths, or point it at a directory you do not mind
exposing together with its parents.

=============================================================================
ERRORS BECOME STATUS CODES
=============================================================================

    ┌──────────────────────────────────┬──────────────────────────────┐
    │ GET, file missing / unreadable   │ 404, empty body              │
    │ GET, contents not UTF-8 text     │ 500, empty body              │
    │ POST, cannot create the file     │ 500, "Failed to create ..."  │
    │ POST, created but write failed   │ 201, "Failed to write ..."   │
    └──────────────────────────────────┴──────────────────────────────┘

In the last row the write error sets 500 and a message, then the success
path still reports 201 Created. Clients that care must check the body.

Nothing here raises for filesystem problems; every failure is logged and
turned into a response.

=============================================================================
"""

import logging

from ..http.content_types import ContentType
from ..http.request import HTTPMethod, HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


FILES_PREFIX = "/files/"


class FileHandler:
    """
    Handler for the /files route.

    Usage:
        files = FileHandler("/tmp/data")
        router.add_route("/files", files.handle, name="files")
    """

    def __init__(self, directory: str = "."):
        """
        Args:
            directory: Base directory. Used verbatim as a string prefix;
                       it is not resolved or checked for existence.
        """
        self.directory = directory

    def resolve(self, path: str) -> str:
        """
        Map a request path to a filesystem path.

        Returns "<directory>/<name>" where name is whatever follows
        "/files/" (empty if the path lacks that literal prefix).
        """
        name = path[len(FILES_PREFIX):] if path.startswith(FILES_PREFIX) else ""
        return f"{self.directory}/{name}"

    def handle(self, request: HTTPRequest, draft: HTTPResponse) -> HTTPResponse:
        """Dispatch on the request method."""
        target = self.resolve(request.path)

        if request.method is HTTPMethod.GET:
            return self._read_file(target, draft)
        if request.method is HTTPMethod.POST:
            return self._write_file(target, request.body or "", draft)

        return draft.with_status(HTTPStatus.METHOD_NOT_ALLOWED)

    def _read_file(self, target: str, draft: HTTPResponse) -> HTTPResponse:
        # ─────────────────────────────────────────────────────────────────
        # READ: any OSError (missing, directory, permission) → 404
        # ─────────────────────────────────────────────────────────────────
        try:
            with open(target, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.warning(f"Cannot read {target}: {e}")
            return draft.with_status(HTTPStatus.NOT_FOUND)

        # ─────────────────────────────────────────────────────────────────
        # DECODE: the body model is text, binary files cannot be served
        # ─────────────────────────────────────────────────────────────────
        try:
            contents = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Cannot decode {target} as text: {e}")
            return draft.with_status(HTTPStatus.INTERNAL_SERVER_ERROR)

        return (draft
            .with_header("Content-Type", str(ContentType.OCTET_STREAM))
            .with_body(contents))

    def _write_file(self, target: str, body: str, draft: HTTPResponse) -> HTTPResponse:
        # ─────────────────────────────────────────────────────────────────
        # CREATE (truncate-or-create)
        # ─────────────────────────────────────────────────────────────────
        try:
            f = open(target, "wb")
        except OSError as e:
            logger.warning(f"Cannot create {target}: {e}")
            return (draft
                .with_status(HTTPStatus.INTERNAL_SERVER_ERROR)
                .with_body(f"Failed to create file: {e}"))

        # ─────────────────────────────────────────────────────────────────
        # WRITE
        # ─────────────────────────────────────────────────────────────────
        response = draft
        with f:
            try:
                f.write(body.encode("utf-8"))
            except OSError as e:
                logger.warning(f"Cannot write {target}: {e}")
                response = (response
                    .with_status(HTTPStatus.INTERNAL_SERVER_ERROR)
                    .with_body(f"Failed to write file: {e}"))

        # Reported as created even after a write error (see module docs)
        return response.with_status(HTTPStatus.CREATED)


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# GET reads "<directory>/<name>" and returns it as application/octet-stream;
# POST truncates-or-creates it with the request body; other methods get 405.
# Filesystem errors never escape: they are logged and mapped to 404/500.
#
# KNOWN, KEPT AS-IS:
# - No path traversal protection
# - POST answers 201 even when the write itself failed
# - No locking: concurrent GET and POST on one file race in the OS
# =============================================================================
