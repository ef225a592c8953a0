"""
=============================================================================
ACCESS LOG
=============================================================================

One log line per response written, on the "rawhttp.access" logger:

    [3f2a9c1d] 127.0.0.1 - - [19/Oct/2026:10:15:02 +0000] "GET /echo/abc" 200 3 0.41ms

    Fields: connection id, client ip, timestamp, method and target,
    status code, body bytes, duration.

Connections that fail before a response is written (parse errors, hard
errors) do not produce an access line; they are logged as warnings or
errors by the server instead.

The logger is namespaced so it can be routed on its own:

    logging.getLogger("rawhttp.access").addHandler(file_handler)

=============================================================================
"""

import time
import logging
from dataclasses import dataclass

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("rawhttp.access")


@dataclass
class RequestLog:
    """Structured access log entry for one request."""

    connection_id: str
    client_ip: str
    method: str
    target: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Apache-style line, see module docstring."""
        return (
            f'[{self.connection_id}] {self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    connection_id: str,
    request: HTTPRequest,
    response: HTTPResponse,
    started_at: float,
) -> RequestLog:
    """Build the entry for a written response and emit it at INFO."""
    entry = RequestLog(
        connection_id=connection_id,
        client_ip=request.client_address[0] if request.client_address else "",
        method=request.method,
        target=request.target,
        status_code=int(response.status),
        content_length=len(response.body),
        duration_ms=(time.time() - started_at) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )
    logger.info(entry.to_text())
    return entry
