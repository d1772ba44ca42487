"""
=============================================================================
MINIHTTP - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

A small HTTP/1.1 server with a hand-written streaming request parser, a
fixed prefix-routed route table, gzip content negotiation and a byte-exact
response serializer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTES                                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET  /                   200, empty body                           │
    │   ANY  /echo/{text}        200, body = {text}                        │
    │   ANY  /user-agent         200, body = User-Agent header             │
    │   GET  /files/{name}       200, file contents from --directory       │
    │   POST /files/{name}       201, request body written to the file     │
    │   anything else            404                                       │
    │                                                                      │
    │   Accept-Encoding: gzip    → body gzip-compressed                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Listening socket, accept loop
    │   └── connection.py    # Per-client socket wrapper
    ├── http/                # HTTP protocol
    │   ├── request.py       # Streaming request parser
    │   ├── response.py      # Response model and serializer
    │   ├── router.py        # Prefix router
    │   ├── status_codes.py  # HTTPStatus enum
    │   └── content_types.py # ContentType, EncodingScheme enums
    ├── middleware/
    │   ├── base.py          # Middleware, MiddlewarePipeline
    │   ├── compression.py   # Accept-Encoding / gzip
    │   └── logging.py       # Access log
    └── handlers/
        ├── basic.py         # echo, user-agent
        └── files.py         # /files read and write

=============================================================================
QUICK START
=============================================================================

    python -m minihttp --directory /tmp/data

    curl -i http://127.0.0.1:4221/echo/hello
    curl -i --data 'abc' http://127.0.0.1:4221/files/foo.txt
    curl -i --compressed http://127.0.0.1:4221/files/foo.txt

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
