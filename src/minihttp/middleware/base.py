"""
=============================================================================
MIDDLEWARE BASE CLASSES
=============================================================================

Middleware wraps the router so cross-cutting work (access logging,
response encoding) stays out of the route handlers.

    pipeline.add(LoggingMiddleware())      # outermost
    pipeline.add(CompressionMiddleware())  # closest to the router

    request ──► Logging ──► Compression ──► router.handle
                                                  │
    response ◄── Logging ◄── Compression ◄────────┘

Each middleware receives the request and a `next` callable, calls
next(request) to get the response from the inner layers, and returns a
(possibly updated) response. Responses are values: a middleware returns a
new HTTPResponse rather than editing the one it was given.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# NextHandler is the signature for the next middleware or final handler.
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Abstract base class for middleware.

        class MyMiddleware(Middleware):
            def __call__(self, request, next):
                response = next(request)
                return response.with_header("X-Processed-By", self.name)
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """
        Process the request.

        Args:
            request: The incoming HTTP request
            next: The next handler in the chain

        Returns:
            HTTP response
        """
        pass

    @property
    def name(self) -> str:
        """Get the middleware name for logging."""
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

    The first middleware added is the outermost layer:

        pipeline = MiddlewarePipeline()
        pipeline.add(A).add(B)
        handler = pipeline.wrap(router.handle)   # A(B(router.handle))
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append a middleware. Returns self for chaining."""
        logger.debug(f"Adding middleware: {middleware.name}")
        self._middleware.append(middleware)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with all middleware in the pipeline.

        Given [MW1, MW2] and handler, the result calls
        MW1 → MW2 → handler. We wrap in reverse order so that the
        first-added middleware is the outermost wrapper.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler,
    ) -> NextHandler:
        # A separate function binds middleware/next_handler per layer;
        # a closure inside the loop would capture only the last pair.
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
