"""
=============================================================================
HTTP RESPONSE WRITER
=============================================================================

Builds HTTP/1.1 responses and serializes them to the exact bytes that go
back over the socket.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   HTTP/1.1 200 OK\r\n                      ← STATUS LINE            │
    │   Content-Type: text/plain\r\n             ← HEADERS (optional)     │
    │   Content-Length: 5\r\n                                             │
    │   \r\n                                     ← EMPTY LINE             │
    │   hello                                    ← BODY                   │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

The writer adds nothing on its own: no Date, no Server, no Connection
header. What a handler puts in `headers` is exactly what goes on the wire,
in insertion order. Responses without a typed body are just a status line
and the empty line:

    HTTP/1.1 201 Created\r\n\r\n
    HTTP/1.1 404 Not Found\r\n\r\n

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
                                                         (sendall)

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """
        Serialize the response for Connection.send().

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            <status line>\r\n
            <Name>: <Value>\r\n      ← once per header, in insertion order
            \r\n
            <body bytes>

        =====================================================================
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        head = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return head + self.body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def typed_body(content_type: str, body: Union[str, bytes]) -> HTTPResponse:
    """
    200 OK with Content-Type and Content-Length.

    Content-Length is the byte length of the body, so a str body is encoded
    first and measured afterwards.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers={
            "Content-Type": content_type,
            "Content-Length": str(len(body)),
        },
        body=body,
    )


def ok() -> HTTPResponse:
    """200 OK with no headers and no body."""
    return HTTPResponse(status=HTTPStatus.OK)


def text(body: Union[str, bytes]) -> HTTPResponse:
    """200 OK, text/plain."""
    return typed_body(TEXT_PLAIN, body)


def octet_stream(body: bytes) -> HTTPResponse:
    """200 OK, application/octet-stream."""
    return typed_body(OCTET_STREAM, body)


def created() -> HTTPResponse:
    """201 Created, status line only."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def not_found() -> HTTPResponse:
    """404 Not Found, status line only."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)
