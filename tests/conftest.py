"""
pytest configuration and fixtures.
"""

import socket
import threading
from dataclasses import dataclass
from typing import Callable, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rawhttp import HTTPServer, ServerConfig
from rawhttp.core import Connection


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /echo/hello HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"hello, file store"
    return (
        b"POST /files/notes.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n" +
        f"Content-Length: {len(body)}\r\n".encode() +
        b"\r\n"
    ) + body


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """Empty base directory for the file routes."""
    directory = tmp_path / "files"
    directory.mkdir()
    return directory


@pytest.fixture
def config(files_dir: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        directory=str(files_dir),
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def server(config: ServerConfig) -> HTTPServer:
    """A server that is not listening; drive it with serve_connection()."""
    return HTTPServer(config)


@dataclass
class Exchange:
    """What came back from pushing raw bytes through serve_connection()."""

    response: bytes
    error: Optional[BaseException]
    connection: Connection


def recv_all(sock: socket.socket) -> bytes:
    """Read until the peer closes."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


@pytest.fixture
def exchange(server: HTTPServer) -> Callable[[bytes], Exchange]:
    """
    Send raw request bytes over a socketpair and run serve_connection()
    on the other end, in this thread.

    The client's write side is shut down after sending, so an incomplete
    request hits EOF instead of blocking.
    """
    def run(raw: bytes) -> Exchange:
        client, server_side = socket.socketpair()
        client.settimeout(5.0)
        try:
            conn = Connection(
                socket=server_side,
                address=("127.0.0.1", 50000),
                timeout=5.0,
            )
            client.sendall(raw)
            client.shutdown(socket.SHUT_WR)

            error = None
            try:
                server.serve_connection(conn)
            except Exception as e:
                error = e

            return Exchange(response=recv_all(client), error=error, connection=conn)
        finally:
            client.close()

    return run


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Open a connection, send raw bytes, return everything sent back."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(raw)
            return recv_all(sock)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A listening server on a free port."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
