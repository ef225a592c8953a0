"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The layers below HTTP:

    socket_server.py   SocketServer - bind, listen, accept loop, signals
    connection.py      Connection   - buffered reads, sendall, close once

    SocketServer.accept() ──► Connection ──► HTTPServer (one thread each)

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Wraps one client socket
    "ConnectionState",  # Per-connection lifecycle states
]
