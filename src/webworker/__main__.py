"""
=============================================================================
WEBWORKER CLI ENTRY POINT
=============================================================================

    # Serve ./www on localhost:8080
    python -m webworker

    # Custom document root and 404 page
    python -m webworker --root ./www --not-found-page ./www/404.html

    # Listen on all interfaces, give slow clients 10 seconds
    python -m webworker --host 0.0.0.0 --read-timeout 10

Environment variables (see ServerConfig.from_env) provide the defaults;
command-line arguments override them.

=============================================================================
"""

import argparse
import locale
import sys

from . import __version__
from .server import WebServer
from .config import ServerConfig


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for every default value."""
    parser = argparse.ArgumentParser(
        prog="webworker",
        description="Minimal multi-threaded HTTP/1.1 file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webworker                               # Serve ./www on 127.0.0.1:8080
  python -m webworker --port 3000                   # Custom port
  python -m webworker --root ./www                  # Custom document root
  python -m webworker --read-timeout 10             # Drop stalled clients
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--read-timeout", "-t",
        type=float,
        default=defaults.read_timeout,
        help="Seconds to wait for the request head (default: wait forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.root_dir,
        help=f"Document root (default: {defaults.root_dir})"
    )

    parser.add_argument(
        "--not-found-page", "-n",
        default=defaults.not_found_page,
        help=f"Body of every 404 response (default: {defaults.not_found_page})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webworker {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        root_dir=args.root,
        not_found_page=args.not_found_page,
        read_timeout=args.read_timeout,
        log_level=args.log_level,
    )

    try:
        server = WebServer(config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        # Dates in headers and pages follow the environment's LC_TIME
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        print(f"Warning: {e}, using the C locale for dates", file=sys.stderr)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
