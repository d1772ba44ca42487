"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps an accepted client socket with the small API the request pipeline
needs: a buffered binary stream to parse from, a send method, and a
proper close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does not preserve message boundaries. A request sent in one write can
arrive as several recv() chunks, or glued to the next one:

    Client sends:   "GET /echo/abc HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /ec"
        recv() → "ho/abc HTTP/1.1\r\nHo"
        recv() → "st: x\r\n\r\n"

Instead of reassembling chunks by hand, the connection exposes
socket.makefile("rb"): a buffered reader whose readline() and read(n)
block until a whole line or exactly n bytes (or end of stream) are
available. That is precisely what the line-oriented request parser and
Content-Length framing need.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

    accept ──► read request ──► send response ──► close

There is no keep-alive. Closing is how the client learns the response is
complete when it does not trust Content-Length.

=============================================================================
"""

import contextlib
import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


# Discarding unread client bytes on close stops at whichever limit comes first
DRAIN_TIMEOUT = 0.5         # seconds
DRAIN_LIMIT = 64 * 1024     # bytes
DRAIN_CHUNK = 4096


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Parsing the request
    PROCESSING = "processing"  # Request parsed, pipeline running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED READING                                                 │
    │     └── reader: file object over the socket for the parser           │
    │                                                                      │
    │  2. WRITING                                                          │
    │     └── send_response(): sendall(), transport errors → False         │
    │                                                                      │
    │  3. GRACEFUL CLOSE                                                   │
    │     └── FIN, drain, close; usable as a context manager               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier for log lines.
        state: Current connection state.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192
    timeout: Optional[float] = None   # None = block forever

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # Blocking socket; settimeout(None) means no timeout at all
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    @property
    def reader(self) -> BinaryIO:
        """
        Buffered binary stream over the socket.

        Created on first access and closed together with the connection.
        """
        if self._reader is None:
            self.state = ConnectionState.READING
            self._reader = self.socket.makefile("rb", buffering=self.buffer_size)
        return self._reader

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response data to the client.

        Uses sendall() so the whole response goes out; send() may write
        only part of it when the kernel buffer is full.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the client sees end of response
        2. Drain whatever the client still sends, briefly
        3. close(): release the file descriptor
        """
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSING

        reader, self._reader = self._reader, None
        if reader is not None:
            with contextlib.suppress(OSError):
                reader.close()

        # The peer may already be gone; every step is best effort
        with contextlib.suppress(OSError):
            self.socket.shutdown(socket.SHUT_WR)
            self._drain()
        self.socket.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] closed after {self.age:.3f}s")

    def _drain(self):
        # Unread bytes left in the kernel buffer turn our FIN into a RST,
        # which can destroy the response before the client reads it.
        # Bounded in bytes and time: a client still pushing a rejected
        # upload is cut off rather than read to the end.
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0
        while drained < DRAIN_LIMIT:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.socket.settimeout(remaining)
            chunk = self.socket.recv(DRAIN_CHUNK)
            if not chunk:
                break
            drained += len(chunk)

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                request = parser.parse(conn.reader, conn.address)
                conn.send_response(response.to_bytes())
            # Connection automatically closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
