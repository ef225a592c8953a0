"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can answer with, as an IntEnum.

    HTTP/1.1 404 Not Found\r\n
             ─┬─ ────┬────
              │      └── Reason phrase (HTTPStatus.phrase)
              └───────── Status code  (int(HTTPStatus))

The server only ever emits three codes: 200 for successful reads,
201 after a file upload, 404 for unknown routes and missing files.
Protocol errors are answered by closing the connection, never with
a 4xx status line.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.CREATED.phrase
        'Created'
    """

    OK = 200            # Successful read (root, echo, user-agent, file)
    CREATED = 201       # File written by POST /files/<name>
    NOT_FOUND = 404     # Unknown route or missing file

    @property
    def phrase(self) -> str:
        """The reason phrase written after the code in the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
}
