"""
=============================================================================
HANDLER DISPATCH
=============================================================================

Turns a RouteMatch into a response by calling the handler for its kind.

    RouteKind.ROOT        ──►  basic.root
    RouteKind.ECHO        ──►  basic.echo          (captured = text)
    RouteKind.USER_AGENT  ──►  basic.user_agent
    RouteKind.FILE_GET    ──►  FileHandler.get     (captured = file name)
    RouteKind.FILE_POST   ──►  FileHandler.post    (captured = file name)
    RouteKind.NOT_FOUND   ──►  basic.fallback

The mapping is built once from the closed RouteKind enum. Every kind has
exactly one handler; a missing entry is a KeyError at construction time,
not a surprise at request time.

=============================================================================
"""

from typing import Callable, Dict

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.router import RouteKind, RouteMatch
from . import basic
from .files import FileHandler, FileStore


Handler = Callable[[HTTPRequest, str], HTTPResponse]


class Dispatcher:
    """
    Calls the handler selected by the router.

    Usage:
        dispatcher = Dispatcher(FileStore("/tmp"))
        response = dispatcher.dispatch(request, router.match(...))
    """

    def __init__(self, store: FileStore):
        self.files = FileHandler(store)
        self._handlers: Dict[RouteKind, Handler] = {
            RouteKind.ROOT: basic.root,
            RouteKind.ECHO: basic.echo,
            RouteKind.USER_AGENT: basic.user_agent,
            RouteKind.FILE_GET: self.files.get,
            RouteKind.FILE_POST: self.files.post,
            RouteKind.NOT_FOUND: basic.fallback,
        }
        missing = set(RouteKind) - set(self._handlers)
        if missing:
            raise KeyError(f"No handler for {sorted(k.name for k in missing)}")

    def dispatch(self, request: HTTPRequest, match: RouteMatch) -> HTTPResponse:
        """Run the handler for match.kind. Hard errors propagate."""
        return self._handlers[match.kind](request, match.captured)
