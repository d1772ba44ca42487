"""
=============================================================================
PREFIX ROUTER
=============================================================================

Maps a request path to a handler using a small, ordered table of path
prefixes. There are no path parameters and no per-method routes: a handler
receives the whole request and decides for itself what the rest of the
path and the method mean.

=============================================================================
MATCHING
=============================================================================

    Routes are tried in registration order; the first match wins.

        ┌─────────────┬─────────┬────────────────────────────────────┐
        │ pattern     │ exact?  │ matches                             │
        ├─────────────┼─────────┼────────────────────────────────────┤
        │ /           │ yes     │ "/" only                            │
        │ /echo       │ no      │ "/echo", "/echo/abc", "/echoes"     │
        │ /user-agent │ no      │ "/user-agent", "/user-agent/x"      │
        │ /files      │ no      │ "/files/a.txt", "/files"            │
        └─────────────┴─────────┴────────────────────────────────────┘

    Anything else goes to the not-found handler (404).

    Because matching is a plain startswith(), "/echoes" is routed to the
    echo handler. That is the intended prefix semantics, not a bug.

=============================================================================
HANDLER CONTRACT
=============================================================================

    def handler(request: HTTPRequest, draft: HTTPResponse) -> HTTPResponse

    The draft already carries the request's version and the route's
    default status. The handler returns the response it wants to send,
    usually built from the draft with the with_*() helpers.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, draft_response
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


# Type alias for route handler functions
Handler = Callable[[HTTPRequest, HTTPResponse], HTTPResponse]


def return_draft(request: HTTPRequest, draft: HTTPResponse) -> HTTPResponse:
    """Handler that sends the route's default response unchanged."""
    return draft


@dataclass
class Route:
    """
    A registered route.

        Route(
            pattern="/echo",           # Path prefix (or exact path)
            handler=echo,              # Handler function
            exact=False,               # Prefix match
            status=HTTPStatus.OK,      # Default status of the draft
            name="echo",               # For logging
        )
    """

    pattern: str
    handler: Handler
    exact: bool = False
    status: HTTPStatus = HTTPStatus.OK
    name: Optional[str] = None

    def matches(self, path: str) -> bool:
        if self.exact:
            return path == self.pattern
        return path.startswith(self.pattern)


class Router:
    """
    Ordered prefix router.

    Usage:
        router = Router()
        router.add_route("/", return_draft, exact=True)
        router.add_route("/echo", echo)

        response = router.handle(request)
    """

    def __init__(self, not_found: Handler = return_draft):
        self._routes: List[Route] = []
        self._not_found = Route(
            pattern="",
            handler=not_found,
            status=HTTPStatus.NOT_FOUND,
            name="not-found",
        )

    def add_route(
        self,
        pattern: str,
        handler: Handler,
        exact: bool = False,
        status: HTTPStatus = HTTPStatus.OK,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route to the table.

        Args:
            pattern: Path prefix, or the full path when exact=True.
            handler: Function (request, draft) -> response.
            exact: Require the whole path to equal pattern.
            status: Status the draft response starts with.
            name: Label used in debug logs. Defaults to the handler name.

        Returns:
            The created Route.
        """
        route = Route(
            pattern=pattern,
            handler=handler,
            exact=exact,
            status=status,
            name=name or getattr(handler, "__name__", pattern),
        )
        self._routes.append(route)
        return route

    def match(self, path: str) -> Route:
        """
        Find the route for a path.

        Returns the not-found route when nothing in the table matches,
        so the result is never None.
        """
        for route in self._routes:
            if route.matches(path):
                return route
        return self._not_found

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and run its handler.

        1. Find the first matching route
        2. Build the draft response (request version, route status)
        3. Let the handler turn the draft into the final response
        """
        route = self.match(request.path)
        logger.debug(f"{request.method} {request.path} → {route.name}")

        draft = draft_response(request.version, route.status)
        return route.handler(request, draft)

    @property
    def routes(self) -> List[Route]:
        """Registered routes, in match order."""
        return list(self._routes)
