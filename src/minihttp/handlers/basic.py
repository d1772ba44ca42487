"""
Built-in text routes: echo and user-agent.

Neither route looks at the request method. GET, POST, PUT and DELETE
against /echo/... or /user-agent all behave the same.
"""

from ..http.content_types import ContentType
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


ECHO_PREFIX = "/echo/"


def echo(request: HTTPRequest, draft: HTTPResponse) -> HTTPResponse:
    """
    Reply with whatever follows "/echo/" in the path.

        GET /echo/hello  →  200, "hello"
        GET /echo        →  200, ""   (literal "/echo/" prefix absent)
    """
    text = ""
    if request.path.startswith(ECHO_PREFIX):
        text = request.path[len(ECHO_PREFIX):]

    return (draft
        .with_header("Content-Type", str(ContentType.TEXT_PLAIN))
        .with_body(text))


def user_agent(request: HTTPRequest, draft: HTTPResponse) -> HTTPResponse:
    """
    Reply with the User-Agent request header.

    A missing header turns the response into a 404 with the message
    "User-Agent header not found" and no body.
    """
    agent = request.user_agent
    if agent is None:
        return draft.with_status(HTTPStatus.NOT_FOUND, "User-Agent header not found")

    return (draft
        .with_header("Content-Type", str(ContentType.TEXT_PLAIN))
        .with_body(agent))
