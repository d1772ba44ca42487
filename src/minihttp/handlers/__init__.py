"""
=============================================================================
ROUTE HANDLERS
=============================================================================

The fixed route table of the server:

    ┌──────────────────┬──────────────┬────────────────┐
    │ Path             │ Handler      │ Default status │
    ├──────────────────┼──────────────┼────────────────┤
    │ exactly /        │ root         │ 200 OK         │
    │ /echo...         │ echo         │ 200 OK         │
    │ /user-agent...   │ user_agent   │ 200 OK         │
    │ /files...        │ FileHandler  │ 200 OK         │
    │ anything else    │ not-found    │ 404 Not Found  │
    └──────────────────┴──────────────┴────────────────┘

Root and not-found have no logic of their own: they send the draft
response exactly as the router built it.

=============================================================================
"""

from ..http.router import Router, return_draft
from .basic import echo, user_agent
from .files import FileHandler


def build_router(directory: str = ".") -> Router:
    """
    Build the router with the built-in routes, in priority order.

    Args:
        directory: Base directory for the /files route.
    """
    router = Router(not_found=return_draft)
    router.add_route("/", return_draft, exact=True, name="root")
    router.add_route("/echo", echo)
    router.add_route("/user-agent", user_agent)
    router.add_route("/files", FileHandler(directory).handle, name="files")
    return router


__all__ = [
    "build_router",
    "echo",
    "user_agent",
    "FileHandler",
]
