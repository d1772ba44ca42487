"""
=============================================================================
LISTENING SOCKET AND ACCEPT LOOP
=============================================================================

Owns the listening socket. Every accepted client is wrapped in a
Connection and handed to a callback; threads and HTTP are the caller's
business.

    create_server(host, port) ──► accept() ──► Connection ──► on_connection
          (SO_REUSEADDR)             ▲                              │
                                     └──────────────────────────────┘

=============================================================================
STOPPING
=============================================================================

accept() wakes up once a second so the loop notices shutdown() without a
wake-up connection. SIGINT and SIGTERM call shutdown() only while serving
on the main thread: Python refuses to install signal handlers anywhere
else, so a server running in a background thread (as in the tests) is
stopped by calling shutdown() directly.

Connections already handed off keep running; stopping the listener only
stops new ones from being accepted.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionCallback = Callable[[Connection], None]

ACCEPT_POLL_INTERVAL = 1.0  # seconds


class SocketServer:
    """
    TCP listener.

    Usage:
        listener = SocketServer(config)
        listener.start(on_connection)   # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None
        self._stopping = threading.Event()
        self._listening = threading.Event()
        self._saved_handlers: Dict[int, object] = {}

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) actually bound; the configured pair before start()."""
        return self._bound_address or (self.config.host, self.config.port)

    def start(self, on_connection: ConnectionCallback):
        """
        Bind, listen and accept until shutdown().

        Args:
            on_connection: Called on the accept thread for every client.
                           It has to return quickly.

        Raises:
            OSError: If the address cannot be bound.
        """
        host, port = self.config.host, self.config.port
        try:
            self._socket = socket.create_server((host, port), backlog=self.config.backlog)
        except OSError as e:
            logger.error(f"Cannot listen on {host}:{port}: {e}")
            raise

        self._socket.settimeout(ACCEPT_POLL_INTERVAL)
        self._bound_address = self._socket.getsockname()[:2]
        self._stopping.clear()
        self._install_signal_handlers()

        logger.info("Listening on %s:%s", *self._bound_address)
        self._listening.set()

        try:
            self._serve(on_connection)
        finally:
            self._close()

    def _serve(self, on_connection: ConnectionCallback):
        while not self._stopping.is_set():
            try:
                client, peer = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._stopping.is_set():
                    logger.error(f"accept() failed: {e}")
                break

            logger.debug("Accepted %s:%s", *peer[:2])
            on_connection(Connection(
                socket=client,
                address=peer[:2],
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            ))

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._listening.wait(timeout)

    def shutdown(self):
        """Stop accepting. Callable from any thread, any number of times."""
        if not self._stopping.is_set():
            logger.info("Stopping listener")
        self._stopping.set()

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}")
            self.shutdown()

        for signum in (signal.SIGINT, signal.SIGTERM):
            self._saved_handlers[signum] = signal.signal(signum, on_signal)

    def _restore_signal_handlers(self):
        while self._saved_handlers:
            signum, handler = self._saved_handlers.popitem()
            signal.signal(signum, handler)

    def _close(self):
        self._restore_signal_handlers()
        if self._socket is not None:
            self._socket.close()
            self._socket = None
        self._listening.clear()
        logger.info("Listener closed")
