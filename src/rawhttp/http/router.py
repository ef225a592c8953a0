"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request's method and target onto one of a small, closed set of
handlers.

=============================================================================
THE ROUTE TABLE
=============================================================================

Routes are checked top to bottom and the first match wins:

    ┌───┬────────┬─────────────┬─────────┬────────────┐
    │ # │ Method │ Pattern     │ Match   │ Kind       │
    ├───┼────────┼─────────────┼─────────┼────────────┤
    │ 1 │ any    │ /           │ exact   │ ROOT       │
    │ 2 │ GET    │ /files/     │ prefix  │ FILE_GET   │
    │ 3 │ POST   │ /files/     │ prefix  │ FILE_POST  │
    │ 4 │ any    │ /echo/      │ prefix  │ ECHO       │
    │ 5 │ any    │ /user-agent │ exact   │ USER_AGENT │
    │   │        │ (no match)  │         │ NOT_FOUND  │
    └───┴────────┴─────────────┴─────────┴────────────┘

A prefix match captures whatever follows the prefix, verbatim:

    GET /files/a/b.txt   →  FILE_GET,  captured="a/b.txt"
    GET /echo/x%20y      →  ECHO,      captured="x%20y"   (no decoding)

Matching never fails: anything not in the table is NOT_FOUND.

=============================================================================
WHY A TABLE AND NOT DECORATORS?
=============================================================================

The set of routes is fixed and known up front. A tuple of frozen Route
records is read-only after import, ordering is visible at a glance, and
dispatch is a lookup on a closed enum instead of calling arbitrary
registered functions.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class RouteKind(Enum):
    """The handler a request resolves to."""

    ROOT = "root"
    ECHO = "echo"
    USER_AGENT = "user_agent"
    FILE_GET = "file_get"
    FILE_POST = "file_post"
    NOT_FOUND = "not_found"


class MatchStyle(Enum):
    EXACT = "exact"     # whole target equals the pattern
    PREFIX = "prefix"   # target starts with the pattern, rest is captured


@dataclass(frozen=True)
class Route:
    """
    One row of the route table.

    Attributes:
        kind: Handler this route selects.
        pattern: Literal path or path prefix.
        style: Exact or prefix match.
        method: Required method, or None for any method.
    """

    kind: RouteKind
    pattern: str
    style: MatchStyle
    method: Optional[str] = None

    def match(self, method: str, target: str) -> Optional[str]:
        """
        Return the captured suffix if this route matches, else None.

        Exact routes capture "".
        """
        if self.method is not None and self.method != method:
            return None

        if self.style is MatchStyle.EXACT:
            return "" if target == self.pattern else None

        if target.startswith(self.pattern):
            return target[len(self.pattern):]
        return None


@dataclass(frozen=True)
class RouteMatch:
    """
    Result of routing a request.

    Example:
        Route:   GET /files/ (prefix)
        Target:  /files/report.bin
        Result:  RouteMatch(kind=FILE_GET, captured="report.bin")
    """

    kind: RouteKind
    captured: str = ""


DEFAULT_ROUTES: Tuple[Route, ...] = (
    Route(RouteKind.ROOT, "/", MatchStyle.EXACT),
    Route(RouteKind.FILE_GET, "/files/", MatchStyle.PREFIX, method="GET"),
    Route(RouteKind.FILE_POST, "/files/", MatchStyle.PREFIX, method="POST"),
    Route(RouteKind.ECHO, "/echo/", MatchStyle.PREFIX),
    Route(RouteKind.USER_AGENT, "/user-agent", MatchStyle.EXACT),
)


class Router:
    """
    First-match router over an ordered, immutable route table.

    Usage:
        router = Router()
        match = router.match("GET", "/echo/hello")
        # RouteMatch(kind=RouteKind.ECHO, captured="hello")
    """

    def __init__(self, routes: Tuple[Route, ...] = DEFAULT_ROUTES):
        self._routes = tuple(routes)

    @property
    def routes(self) -> Tuple[Route, ...]:
        return self._routes

    def match(self, method: str, target: str) -> RouteMatch:
        """
        Resolve a method and target to exactly one route kind.

        Method comparison is case-sensitive: "get /files/x" is NOT_FOUND.
        """
        for route in self._routes:
            captured = route.match(method, target)
            if captured is not None:
                return RouteMatch(kind=route.kind, captured=captured)

        return RouteMatch(kind=RouteKind.NOT_FOUND)
