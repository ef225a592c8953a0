"""
=============================================================================
REQUEST HANDLERS
=============================================================================

One handler per route kind:

    basic.py      root, echo, user-agent, not-found
    files.py      FileStore plus GET/POST /files/<name>
    dispatch.py   Dispatcher: RouteKind → handler

Every handler has the same shape:

    handler(request: HTTPRequest, captured: str) -> HTTPResponse

where `captured` is the part of the target after a prefix route
("/echo/abc" → "abc"), or "" for exact routes.

=============================================================================
"""

from .dispatch import Dispatcher
from .files import FileStore, FileHandler, PathOutsideBase

__all__ = [
    "Dispatcher",
    "FileStore",
    "FileHandler",
    "PathOutsideBase",
]
