"""
=============================================================================
RAWHTTP - A Minimal HTTP/1.1 Server on Raw Sockets
=============================================================================

Reads requests byte by byte off TCP connections, parses them by hand,
and answers a fixed set of routes:

    GET  /                 empty 200
    GET  /echo/<text>      200 text/plain, body = <text>
    GET  /user-agent       200 text/plain, body = User-Agent header
    GET  /files/<name>     200 application/octet-stream, or 404
    POST /files/<name>     store the body, 201
    anything else          404

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    rawhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m rawhttp)
    ├── server.py            # HTTPServer, per-connection state machine
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # One log line per response
    ├── core/
    │   ├── socket_server.py # Listener and accept loop
    │   └── connection.py    # Connection wrapper
    ├── http/
    │   ├── request.py       # Request line, headers, body
    │   ├── response.py      # Response writer
    │   ├── router.py        # Ordered route table
    │   └── status_codes.py  # HTTPStatus enum
    └── handlers/
        ├── basic.py         # root, echo, user-agent, not-found
        ├── files.py         # FileStore, GET/POST /files/
        └── dispatch.py      # RouteKind → handler

=============================================================================
QUICK START
=============================================================================

    from rawhttp import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=4221, directory="/tmp"))
    server.run()

    $ curl -i http://localhost:4221/echo/hello
    HTTP/1.1 200 OK
    Content-Type: text/plain
    Content-Length: 5

    hello

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
