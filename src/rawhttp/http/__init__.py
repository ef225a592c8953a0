"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything that knows about the HTTP wire format:

    request.py       Request line parser, header reader, body reader
    router.py        Ordered route table, first match wins
    response.py      HTTPResponse and its serialization
    status_codes.py  HTTPStatus enum (200, 201, 404)

Data flows one way:

    bytes ──► RequestLine ──► Headers (+ body) ──► RouteMatch
                                                      │
    bytes ◄── HTTPResponse.to_bytes() ◄── handler ◄───┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestLine,
    Headers,
    HTTPParseError,
    EmptyRequestLine,
    MalformedRequestLine,
    HeaderReadError,
    InvalidContentLength,
    BodyReadError,
    parse_request_line,
    read_request_line,
    read_headers,
    read_body,
    read_request,
)
from .response import (
    HTTPResponse,
    ok,             # 200 OK, empty
    text,           # 200 OK, text/plain
    octet_stream,   # 200 OK, application/octet-stream
    created,        # 201 Created
    not_found,      # 404 Not Found
)
from .router import Router, Route, RouteKind, RouteMatch, MatchStyle
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestLine",
    "Headers",
    "HTTPParseError",
    "EmptyRequestLine",
    "MalformedRequestLine",
    "HeaderReadError",
    "InvalidContentLength",
    "BodyReadError",
    "parse_request_line",
    "read_request_line",
    "read_headers",
    "read_body",
    "read_request",

    # Responses
    "HTTPResponse",
    "ok",
    "text",
    "octet_stream",
    "created",
    "not_found",

    # Routing
    "Router",
    "Route",
    "RouteKind",
    "RouteMatch",
    "MatchStyle",

    # Status codes
    "HTTPStatus",
]
