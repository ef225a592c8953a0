"""
Handlers that need nothing but the request: root, echo, user-agent and
the not-found fallback.
"""

from ..http.request import HTTPRequest, encode_wire
from ..http.response import HTTPResponse, ok, text, not_found


def root(request: HTTPRequest, captured: str = "") -> HTTPResponse:
    """GET / - empty 200."""
    return ok()


def echo(request: HTTPRequest, captured: str) -> HTTPResponse:
    """
    GET /echo/<text> - returns <text> as text/plain.

    The text is sent back exactly as it appeared in the target, with no
    percent-decoding: /echo/a%20b answers "a%20b".
    """
    return text(encode_wire(captured))


def user_agent(request: HTTPRequest, captured: str = "") -> HTTPResponse:
    """GET /user-agent - the User-Agent header as text/plain ("" if absent)."""
    return text(encode_wire(request.user_agent))


def fallback(request: HTTPRequest, captured: str = "") -> HTTPResponse:
    """Anything unrouted - bare 404."""
    return not_found()
