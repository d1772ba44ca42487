"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The transport layer underneath HTTP:

    socket_server.py   Listening socket and accept loop
    connection.py      Per-client wrapper: buffered reader, send, close

The HTTP server (minihttp.server) plugs into SocketServer with a callback
that starts one thread per accepted Connection.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Wrapper for client socket - handles I/O
    "ConnectionState",  # Enum for connection lifecycle states
]
