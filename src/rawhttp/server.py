"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: the listener accepts, a thread per connection
runs the request through parser, router and handler, and the response
writer puts the bytes back on the wire.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   SocketServer.accept()                                             │
    │        │                                                            │
    │        ▼                                                            │
    │   HTTPServer._handle_connection(conn)   (accept thread)             │
    │        │   threading.Thread(...).start()                            │
    │        ▼                                                            │
    │   HTTPServer._process_connection(conn)  (worker thread)             │
    │        │                                                            │
    │        ▼                                                            │
    │   serve_connection(conn)                                            │
    │        read_request_line ──► read_headers ──► [read_body]           │
    │        Router.match ──► Dispatcher.dispatch                         │
    │        HTTPResponse.to_bytes ──► conn.send                          │
    │        │                                                            │
    │        ▼                                                            │
    │   conn.close()   (always, exactly once)                             │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURES
=============================================================================

    Parse error (empty/malformed request line, bad headers,
    bad Content-Length, truncated body)
        → WARNING log, connection closed, nothing written

    Hard error (filesystem error other than "not found", socket error,
    timeout, anything unexpected from a handler)
        → ERROR log with traceback, connection closed

Either way only the one connection is affected. Nothing is retried.

=============================================================================
CONCURRENCY
=============================================================================

One daemon thread per accepted connection, no pool and no cap. Threads
share nothing but the FileStore's base directory. A slow client only ties
up its own thread (bounded by ServerConfig.timeout when set).

=============================================================================
"""

import time
import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .http import (
    HTTPRequest,
    HTTPParseError,
    Router,
    read_request_line,
    read_headers,
    read_body,
)
from .handlers import Dispatcher, FileStore
from .access_log import log_request


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    HTTP/1.1 server for the echo, user-agent and file routes.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(directory="/srv/files"))
        server.run()   # blocks until Ctrl+C / SIGTERM / stop()

    serve_connection() can also be driven directly with any Connection,
    e.g. one end of socket.socketpair() in tests.

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()  # Fail fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._router = Router()
        self._dispatcher = Dispatcher(
            FileStore(self.config.directory, atomic_writes=self.config.atomic_writes)
        )

    @property
    def address(self):
        """The bound (host, port), real port included once listening."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: if the port cannot be bound or accept() fails.
        """
        self._setup_logging()
        logger.info(
            f"Starting HTTP server on {self.config.host}:{self.config.port}, "
            f"serving files from {self.config.directory}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def stop(self):
        """Stop accepting connections. In-flight connections finish."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("rawhttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a worker thread for a freshly accepted connection.

        Runs on the accept thread, so it only spawns and returns.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """
        Worker thread body: serve one connection and log how it ended.

        This is the top of the worker's stack, so every failure is logged
        here and goes no further; other connections are unaffected.
        """
        try:
            self.serve_connection(conn)
        except HTTPParseError as e:
            logger.warning(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
        except Exception as e:
            logger.exception(f"[{conn.id}] Error handling connection: {e}")

    def serve_connection(self, conn: Connection) -> Optional[HTTPRequest]:
        """
        Run one connection through its whole lifecycle.

        =====================================================================
        STATE MACHINE
        =====================================================================

            PARSING_REQUEST_LINE  read_request_line()
            READING_HEADERS       read_headers()
            READING_BODY          read_body()       only with Content-Length
            DISPATCHING           router + handler
            WRITING_RESPONSE      to_bytes() + sendall()
            CLOSED                always, via the context manager

        =====================================================================

        Returns:
            The request that was served.

        Raises:
            HTTPParseError: the request could not be read. Nothing was sent.
            OSError: filesystem or socket failure.
        """
        started_at = time.time()

        with conn:
            conn.state = ConnectionState.PARSING_REQUEST_LINE
            line = read_request_line(conn.reader)

            conn.state = ConnectionState.READING_HEADERS
            headers = read_headers(conn.reader)

            body = b""
            if "Content-Length" in headers:
                conn.state = ConnectionState.READING_BODY
                body = read_body(conn.reader, headers.content_length)

            request = HTTPRequest(
                line=line,
                headers=headers,
                body=body,
                client_address=conn.address,
            )

            conn.state = ConnectionState.DISPATCHING
            match = self._router.match(request.method, request.target)
            logger.debug(f"[{conn.id}] {request.method} {request.target} -> {match.kind.name}")
            response = self._dispatcher.dispatch(request, match)

            conn.state = ConnectionState.WRITING_RESPONSE
            conn.send(response.to_bytes())

        log_request(conn.id, request, response, started_at)
        return request
