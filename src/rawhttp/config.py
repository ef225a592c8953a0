"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the HTTP server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   1. Defaults         ServerConfig()                                │
    │          │                                                          │
    │          ▼                                                          │
    │   2. Environment      ServerConfig.from_env()   RAWHTTP_* vars      │
    │          │                                                          │
    │          ▼                                                          │
    │   3. Command line     python -m rawhttp --directory /srv/files      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Later sources override earlier ones. The resulting config is validated once
at startup and is never changed by the request handling code afterwards.

=============================================================================
THE BASE DIRECTORY
=============================================================================

The /files/<name> routes read and write files under a single base
directory. It defaults to the platform temp directory (/tmp on Linux),
which is what you get from tempfile.gettempdir().

=============================================================================
"""

import os
import logging
import tempfile
from dataclasses import dataclass, field
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    FILE STORE
    - directory, atomic_writes

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    """

    port: int = 4221
    """
    The port number to listen on. 0 asks the OS for a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = 8192
    """
    Size of the per-connection read buffer in bytes.
    """

    timeout: Optional[float] = None
    """
    Per-connection socket deadline in seconds.
    None = block forever on a silent client.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE
    # ─────────────────────────────────────────────────────────────────────

    directory: str = field(default_factory=tempfile.gettempdir)
    """
    Base directory for GET/POST /files/<name>.
    """

    atomic_writes: bool = True
    """
    Write uploads to a temp file and rename it into place.
    False = truncate the target and write into it directly.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        RAWHTTP_HOST        Bind address (default: 0.0.0.0)
        RAWHTTP_PORT        Listen port (default: 4221)
        RAWHTTP_DIRECTORY   Base directory for /files/ (default: temp dir)
        RAWHTTP_TIMEOUT     Per-connection deadline in seconds (default: none)
        RAWHTTP_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("RAWHTTP_TIMEOUT")
        return cls(
            host=os.getenv("RAWHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("RAWHTTP_PORT", "4221")),
            directory=os.getenv("RAWHTTP_DIRECTORY", tempfile.gettempdir()),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("RAWHTTP_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        """The numeric logging level for log_level."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails immediately instead of
        on the first request that needs it.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not os.path.isdir(self.directory):
            raise ValueError(f"directory does not exist: {self.directory}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
