"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: one thread per accepted connection, one request
per connection.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                              │
    │          │                                                           │
    │          ▼                                                           │
    │   threading.Thread(process_connection)   ← one per connection        │
    │          │                                                           │
    │          ▼                                                           │
    │   RequestParser.parse(conn.reader)                                   │
    │          │            └── HTTPParseError → log, close, no response   │
    │          ▼                                                           │
    │   LoggingMiddleware ─► CompressionMiddleware ─► Router.handle        │
    │          │                                                           │
    │          ▼                                                           │
    │   finalize_content_length ─► to_bytes ─► conn.send_response          │
    │          │                                                           │
    │          ▼                                                           │
    │   conn.close()                                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

Each connection thread owns its Request, its Response and every buffer in
between; nothing is shared across connections, so the pipeline needs no
locks. The only shared resource is the filesystem behind /files, and file
access is not synchronized: a POST and a GET on the same name race at the
OS level.

There is no timeout by default. A client that connects and never sends a
complete request keeps its thread blocked until it disconnects.

Failures never cross connections: a malformed request, a crashing handler
or a broken pipe ends that one connection and nothing else.

=============================================================================
"""

import logging
import threading
from typing import Callable, Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .handlers import build_router
from .http import (
    HTTPRequest, HTTPResponse, HTTPParseError, RequestParser,
    Router, finalize_content_length,
)
from .middleware import MiddlewarePipeline, Middleware, LoggingMiddleware, CompressionMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Minimal HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=4221, directory="/tmp/data"))
        server.run()   # blocks until Ctrl+C / SIGTERM

    Or, without sockets:

        response = server.handle_request(parse_request(raw_bytes))

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, router: Optional[Router] = None):
        """
        Args:
            config: Server configuration. Defaults are used if omitted.
            router: Route table. Defaults to the built-in routes serving
                    files from config.directory.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(
            max_body_size=self.config.max_body_size,
            canonicalize_headers=self.config.canonical_headers,
        )
        self._router = router or build_router(self.config.directory)

        # Logging first (outermost), compression closest to the router
        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware())
        self._middleware.add(CompressionMiddleware())

        # Built lazily so middleware added with use() is included
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware between the built-in ones and the router.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        self._handler = None
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self):
        """Bound (host, port); the real port once listening with port=0."""
        return self._socket_server.address

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._setup_logging()
        logger.info(
            f"Starting {self.config.server_name}, serving files from "
            f"{self.config.directory!r}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections; run() returns shortly after."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening (for tests and embedders)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a worker thread for a freshly accepted connection.

        Runs on the accept thread, so it only spawns and returns.
        """
        thread = threading.Thread(
            target=self.process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def handle_request(self, request: HTTPRequest) -> HTTPResponse:
        """
        Run a parsed request through routing, encoding negotiation and
        Content-Length finalization.

        Returns:
            The response, ready for to_bytes().
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)

        response = self._handler(request)
        return finalize_content_length(response)

    def process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in its own thread).

        Parse errors and handler crashes are logged and the connection is
        closed without a response; write errors are logged by the
        connection itself.
        """
        with conn:
            try:
                request = self._parser.parse(conn.reader, conn.address)
            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Rejected request from {conn.client_ip}: {e}")
                return
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            conn.state = ConnectionState.PROCESSING

            try:
                response = self.handle_request(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")
                return

            if not conn.send_response(response.to_bytes()):
                logger.warning(f"[{conn.id}] Response to {conn.client_ip} abandoned")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. SocketServer accepts; each connection gets its own daemon thread
# 2. Parse → middleware (logging, compression) → router → finalize → send
# 3. Parse errors: logged, connection closed without a response
# 4. Handler crashes and transport errors: logged, connection abandoned
# =============================================================================
