"""
=============================================================================
MINIHTTP CLI ENTRY POINT
=============================================================================

    # Serve files from the current directory on 127.0.0.1:4221
    python -m minihttp

    # Serve files from /tmp/data (the directory is argv[2])
    python -m minihttp --directory /tmp/data

    # Listen on all interfaces, another port, verbose logs
    python -m minihttp --host 0.0.0.0 --port 8080 --log-level DEBUG

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                          # Serve ./ on 127.0.0.1:4221
  python -m minihttp --directory /tmp/data    # Files route reads/writes /tmp/data
  python -m minihttp --host 0.0.0.0 -p 8080   # All interfaces, port 8080
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=".",
        help="Base directory of the /files route (default: current directory)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=4221,
        help="Port to listen on (default: 4221)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOR
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--canonical-headers",
        action="store_true",
        help="Accept request header names in any case (e.g. user-agent)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate CLI arguments to ServerConfig."""
    return ServerConfig(
        host=args.host,
        port=args.port,
        directory=args.directory,
        canonical_headers=args.canonical_headers,
        log_level=args.log_level,
    )


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        server = HTTPServer(config_from_args(args))
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
