"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads an HTTP/1.1 request off a buffered byte stream, one piece at a time,
and turns it into a structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   POST /files/notes.txt HTTP/1.1\r\n        ← REQUEST LINE          │
    │   ─┬── ────────┬─────── ────┬───                                    │
    │  Method      Target      Version                                    │
    │                                                                     │
    │   Host: localhost:4221\r\n                  ← HEADERS               │
    │   User-Agent: curl/8.4.0\r\n                                        │
    │   Content-Length: 5\r\n                                             │
    │   \r\n                                      ← EMPTY LINE            │
    │   hello                                     ← BODY (5 bytes)        │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
READING, NOT SPLITTING
=============================================================================

The request is consumed from the stream in the same order it arrives:

    read_request_line()  →  one line, three tokens
    read_headers()       →  lines until the empty line
    read_body()          →  exactly Content-Length bytes (if given)

Nothing is read past the body, so the reader never blocks waiting for
bytes the client is not going to send.

=============================================================================
TEXT ENCODING
=============================================================================

Request lines and headers are decoded as UTF-8 with "surrogateescape".
Any byte sequence survives a decode/encode round trip unchanged, so
/echo/<text> and the User-Agent value are written back byte for byte,
and file names map onto the same bytes the OS uses for paths.

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterator, Optional, Tuple


WIRE_ENCODING = "utf-8"
WIRE_ERRORS = "surrogateescape"


# =============================================================================
# PARSE ERRORS
# =============================================================================

class HTTPParseError(Exception):
    """
    Raised when a request cannot be read off the connection.

    Every parse error ends the connection without a response. The client
    sees the socket close, not a 400 status line.
    """


class EmptyRequestLine(HTTPParseError):
    """The first line was empty, or the client closed before sending one."""


class MalformedRequestLine(HTTPParseError):
    """The request line did not split into exactly three tokens."""


class HeaderReadError(HTTPParseError):
    """The header block was cut short, unreadable, or malformed."""


class InvalidContentLength(HTTPParseError):
    """Content-Length was not a non-negative base-10 integer."""


class BodyReadError(HTTPParseError):
    """The stream ended before Content-Length body bytes arrived."""


# =============================================================================
# DATA MODEL
# =============================================================================

@dataclass(frozen=True)
class RequestLine:
    """
    The first line of a request.

        "GET /echo/abc HTTP/1.1"  →  RequestLine("GET", "/echo/abc", "HTTP/1.1")
    """

    method: str
    target: str
    version: str


CONTENT_LENGTH_PATTERN = re.compile(r"^[0-9]+$")


def parse_content_length(value: Optional[str]) -> int:
    """
    Parse a Content-Length header value.

    Missing or empty means 0. Anything but ASCII digits (signs, spaces
    inside the number, hex, underscores) raises InvalidContentLength.
    """
    if not value:
        return 0
    if not CONTENT_LENGTH_PATTERN.match(value):
        raise InvalidContentLength(f"Invalid Content-Length: {value!r}")
    return int(value)


class Headers:
    """
    Case-insensitive header mapping.

    =========================================================================
    WHY NOT A PLAIN DICT?
    =========================================================================

    Header names are case-insensitive (RFC 7230), so these all mean
    the same thing:

        User-Agent: curl        user-agent: curl        USER-AGENT: curl

    Keys are stored lowercased; the spelling that was seen last is kept
    for display. A name that appears twice keeps only its last value.

    =========================================================================
    """

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, Tuple[str, str]] = {}
        for name, value in (items or {}).items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        self._items[name.lower()] = (name, value)

    def get(self, name: str, default: str = "") -> str:
        entry = self._items.get(name.lower())
        return entry[1] if entry else default

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()][1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._items.values())

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    @property
    def user_agent(self) -> str:
        """The User-Agent value, or "" when the client sent none."""
        return self.get("User-Agent")

    @property
    def content_length(self) -> int:
        """The Content-Length value, or 0 when absent."""
        return parse_content_length(self.get("Content-Length"))


@dataclass(frozen=True)
class HTTPRequest:
    """
    A fully read request.

    Built once per connection after the body (if any) has been read, and
    never modified afterwards.

    Attributes:
        line: The parsed request line.
        headers: Case-insensitive headers.
        body: Exactly Content-Length bytes, or b"" without that header.
        client_address: (ip, port) of the peer, for logging.
    """

    line: RequestLine
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)

    @property
    def method(self) -> str:
        return self.line.method

    @property
    def target(self) -> str:
        return self.line.target

    @property
    def version(self) -> str:
        return self.line.version

    @property
    def user_agent(self) -> str:
        return self.headers.user_agent


# =============================================================================
# LINE HELPERS
# =============================================================================

def _strip_eol(raw: bytes) -> bytes:
    """Drop one trailing CRLF (or bare LF)."""
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw


def decode_wire(raw: bytes) -> str:
    return raw.decode(WIRE_ENCODING, WIRE_ERRORS)


def encode_wire(text: str) -> bytes:
    return text.encode(WIRE_ENCODING, WIRE_ERRORS)


# =============================================================================
# REQUEST LINE
# =============================================================================

def parse_request_line(line: str) -> RequestLine:
    """
    Split a request line into method, target and version.

    =====================================================================
    REQUEST LINE FORMAT
    =====================================================================

        METHOD SP REQUEST-TARGET SP HTTP-VERSION

    The line is split on single spaces and must give exactly three
    tokens. Method and version are not checked here; the router decides
    what a method means.

        "GET / HTTP/1.1"     → ok
        "GET /"              → MalformedRequestLine (two tokens)
        "GET  / HTTP/1.1"    → MalformedRequestLine (double space)
        ""                   → EmptyRequestLine

    =====================================================================
    """
    if line == "":
        raise EmptyRequestLine("Empty request line")

    parts = line.split(" ")
    if len(parts) != 3:
        raise MalformedRequestLine(f"Invalid request line: {line!r}")

    method, target, version = parts
    return RequestLine(method=method, target=target, version=version)


def read_request_line(reader: BinaryIO) -> RequestLine:
    """
    Read and parse the first line of a request.

    A client that connects and closes without sending anything produces
    an empty read, which is reported as EmptyRequestLine. Socket errors
    propagate as OSError.
    """
    raw = reader.readline()
    return parse_request_line(decode_wire(_strip_eol(raw)))


# =============================================================================
# HEADERS
# =============================================================================

# "Name: value" - no whitespace in the name, optional spaces around value
HEADER_PATTERN = re.compile(r"^([^:\s]+):[ \t]*(.*?)[ \t]*$")


def read_headers(reader: BinaryIO) -> Headers:
    """
    Read header lines up to and including the empty separator line.

    Raises:
        HeaderReadError: on a socket error, a stream that ends before the
            empty line, or a line that is not "Name: value".
        InvalidContentLength: if Content-Length is present but not a
            non-negative integer.
    """
    headers = Headers()

    while True:
        try:
            raw = reader.readline()
        except OSError as e:
            raise HeaderReadError(f"Failed to read headers: {e}") from e

        if not raw.endswith(b"\n"):
            # EOF (possibly mid-line) before the blank line
            raise HeaderReadError("Connection closed before end of headers")

        line = decode_wire(_strip_eol(raw))
        if line == "":
            break

        match = HEADER_PATTERN.match(line)
        if not match:
            raise HeaderReadError(f"Malformed header line: {line!r}")

        name, value = match.groups()
        headers.set(name, value)

    # Validate eagerly so a bad length fails before anything is dispatched
    parse_content_length(headers.get("Content-Length"))
    return headers


# =============================================================================
# BODY
# =============================================================================

def read_body(reader: BinaryIO, length: int) -> bytes:
    """
    Read exactly `length` body bytes.

    BufferedReader.read(n) keeps reading until it has n bytes or hits EOF,
    so a short result always means the client stopped early.
    """
    if length == 0:
        return b""

    try:
        body = reader.read(length)
    except OSError as e:
        raise BodyReadError(f"Failed to read body: {e}") from e

    if body is None or len(body) < length:
        got = 0 if body is None else len(body)
        raise BodyReadError(f"Incomplete body: expected {length} bytes, got {got}")
    return body


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def read_request(
    reader: BinaryIO,
    client_address: Tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """
    Read a whole request: request line, headers, then the body if
    Content-Length was sent.

    HTTPServer runs these steps itself so it can track connection state
    between them; this helper is for callers that just want the request.
    """
    line = read_request_line(reader)
    headers = read_headers(reader)
    body = b""
    if "Content-Length" in headers:
        body = read_body(reader, headers.content_length)
    return HTTPRequest(
        line=line,
        headers=headers,
        body=body,
        client_address=client_address,
    )
