"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The listener: binds a TCP port, accepts connections, and hands each one
off to a callback. It knows nothing about HTTP.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    socket()  ──►  setsockopt()  ──►  bind()  ──►  listen()
                                                      │
                                                      ▼
                              ┌──────────────────► accept() ─────┐
                              │                                   │
                              │            Connection(sock, addr) │
                              │                                   ▼
                              └────────────────  connection_handler(conn)

accept() gets a 1 second timeout so the loop wakes up regularly and can
notice shutdown() being called from a signal handler or another thread.

=============================================================================
ACCEPT FAILURES
=============================================================================

A failing accept() while the server is running means the listening socket
is broken. That is fatal: the error is logged and re-raised so the process
exits, instead of spinning on a dead socket.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening; cleared again on cleanup
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        After start() this is the real address, so port=0 reports the
        port the OS picked.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without "Address already in use" while the
        # previous socket sits in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """
        Turn SIGINT (Ctrl+C) and SIGTERM into a graceful shutdown.

        Python only allows installing signal handlers from the main thread;
        a server started from a worker thread (tests, embedding) is
        stopped with shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called on the accept thread with each new
                Connection. It must return quickly (hand the connection to
                a worker) or it stalls every other client.

        Raises:
            OSError: if binding fails or accept() fails while running.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Timeout is normal: loop around and re-check _running
                continue
            except OSError as e:
                if not self._running:
                    break  # socket closed by shutdown()
                logger.error(f"Accept error: {e}")
                raise

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Stop accepting connections. Idempotent, callable from any thread.

        Connections already handed to workers run to completion.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._ready_event.wait(timeout)
