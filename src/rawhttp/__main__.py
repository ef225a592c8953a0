"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    # Serve files from the temp directory on 0.0.0.0:4221
    python -m rawhttp

    # Serve and accept files in another directory
    python -m rawhttp --directory /srv/files

    # Drop clients that go quiet for 30 seconds
    python -m rawhttp --timeout 30

Defaults come from RAWHTTP_* environment variables (see
ServerConfig.from_env); command-line flags override them.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rawhttp",
        description="Minimal HTTP/1.1 server built on raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m rawhttp                          # Serve /tmp on port 4221
  python -m rawhttp --directory ./files      # Custom files directory
  python -m rawhttp --port 8080 --timeout 30
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help=f"Directory for /files/ (default: {defaults.directory})",
    )

    parser.add_argument(
        "--no-atomic-writes",
        dest="atomic_writes",
        action="store_false",
        help="Write uploads in place instead of via temp file + rename",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        type=str.upper,
        default=defaults.log_level.upper(),
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"rawhttp {__version__}",
    )

    return parser


def config_from_args(argv=None) -> ServerConfig:
    """Environment defaults, overridden by command-line flags."""
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    return ServerConfig(
        host=args.host,
        port=args.port,
        directory=args.directory,
        timeout=args.timeout,
        atomic_writes=args.atomic_writes,
        log_level=args.log_level,
        backlog=defaults.backlog,
        buffer_size=defaults.buffer_size,
    )


def main(argv=None):
    try:
        server = HTTPServer(config_from_args(argv))
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
