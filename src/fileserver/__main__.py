"""
=============================================================================
COMMAND-LINE INTERFACE
=============================================================================

    python -m fileserver                        # ./web_root on 127.0.0.1:8080
    python -m fileserver --root ./site -p 3000
    python -m fileserver --stats                # add /, /stats, /increment
    python -m fileserver --stats --no-files     # counter endpoints only
    python -m fileserver --log-format json

Flags override HTTP_* environment variables, which override defaults.
The web root is created if it does not exist.

=============================================================================
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from . import __version__
from .config import LOG_FORMATS, ServerConfig
from .server import HTTPServer


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal HTTP file server: GET, HEAD, PUT, POST and DELETE under one directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver --root ./site
  python -m fileserver --host 0.0.0.0 --port 3000
  python -m fileserver --stats
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Minimum worker threads (max will be 2x this)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--root", "-r", help="Web root directory (default: ./web_root)")
    parser.add_argument(
        "--stats",
        action="store_true",
        default=None,
        help="Enable the /, /stats and /increment endpoints",
    )
    parser.add_argument(
        "--no-files",
        dest="files",
        action="store_false",
        help="Disable file routes (requires --stats)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        help="Access log format (default: text)",
    )
    parser.add_argument("--version", "-v", action="version", version=f"fileserver {__version__}")

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-based config with explicit flags applied on top."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.workers is not None:
        config.min_workers = args.workers
        config.max_workers = args.workers * 2
    if args.root is not None:
        config.web_root = args.root
    if args.stats is not None:
        config.enable_stats = args.stats
    config.enable_files = args.files
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    os.makedirs(config.web_root, exist_ok=True)

    server = HTTPServer(config)
    try:
        server.run()
    except OSError as e:
        logger.error(f"Server failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
