"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of one request.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

recv() returns whatever bytes happen to have arrived. A request line can
be split over two recv() calls, or a single recv() can hold the headers
and half the body:

    recv() #1:  b"GET /echo/ab"
    recv() #2:  b"c HTTP/1.1\r\nHost: x\r\n\r\n"

The Connection puts a buffered reader (socket.makefile("rb")) in front of
the socket. The parser then asks for what it needs:

    reader.readline()   →  one line, however many recv() calls it takes
    reader.read(n)      →  exactly n bytes, unless the peer closes first

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    ACCEPTED ──► PARSING_REQUEST_LINE ──► READING_HEADERS ──┬──► READING_BODY
                        │                      │            │         │
                        │                      │            ▼         ▼
                        │                      │         DISPATCHING ◄┘
                        │                      │            │
                        │                      │            ▼
                        │                      │      WRITING_RESPONSE
                        │                      │            │
                        ▼                      ▼            ▼
                     ┌──────────────────── CLOSED ◄─────────┘
                     (any failure jumps straight here)

There is no keep-alive: one request is read, one response is written, and
the connection is closed. close() is idempotent, so the context manager
and an explicit close() never release the socket twice.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""

    ACCEPTED = "accepted"
    PARSING_REQUEST_LINE = "parsing_request_line"
    READING_HEADERS = "reading_headers"
    READING_BODY = "reading_body"
    DISPATCHING = "dispatching"
    WRITING_RESPONSE = "writing_response"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used in log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Read buffer size for the reader.
        timeout: Socket deadline in seconds, None to block forever.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 8192
    timeout: Optional[float] = None

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # settimeout(None) puts the socket in plain blocking mode
        self.socket.settimeout(self.timeout)
        self._reader = self.socket.makefile("rb", buffering=self.buffer_size)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary reader over the socket."""
        return self._reader

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> None:
        """
        Send the complete response.

        sendall() either sends every byte or raises. A short write is an
        OSError that ends the connection; there is no retry.
        """
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Release the connection. Safe to call more than once.

        1. Close the buffered reader (it holds a reference to the socket)
        2. shutdown(SHUT_WR) so the client sees EOF right away
        3. Drain bytes already sitting in the kernel receive buffer, so
           close() does not turn into a RST that could discard the response
        4. close() the socket
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSED

        try:
            self._reader.close()
        except OSError:
            pass

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # peer already gone

        try:
            self.socket.setblocking(False)
            while self.socket.recv(4096):
                pass
        except OSError:
            pass  # nothing (more) buffered

        try:
            self.socket.close()
        except OSError:
            pass

        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Use with 'with' so the socket is released on every exit path:

            with conn:
                request = read_request(conn.reader)
                conn.send(response.to_bytes())
            # closed here, even if anything above raised
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
