"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to know at startup, in one dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments     python -m fileserver --port 3000
    2. Environment variables      HTTP_PORT=3000 python -m fileserver
    3. Defaults below

The configuration is fixed for the lifetime of the server. There is no
endpoint to change it at runtime.

=============================================================================
ROUTE SETS
=============================================================================

Two route sets can be switched on independently:

    enable_files   GET/HEAD/POST/PUT/DELETE on files under web_root
    enable_stats   fixed endpoints "/", "/stats" and "/increment",
                   matched BEFORE the file routes

With only the stats routes enabled, every other path is 404.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_FORMATS = ("text", "json")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    NETWORK     host, port, backlog, buffer_size, timeout
    HTTP        keep_alive, keep_alive_timeout, max_request_size
    THREADING   min_workers, max_workers
    CONTENT     web_root, enable_files, enable_stats
    LOGGING     log_level, log_format
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Address to bind. "0.0.0.0" listens on all interfaces."""

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 8192
    """Bytes read from a socket per recv() call."""

    timeout: Optional[float] = 30.0
    """Socket timeout for the first request on a connection."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    keep_alive_timeout: float = 5.0

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Upper bound for a whole request, body included. Caps upload size."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    web_root: str = "./web_root"
    """Directory every served or mutated path is resolved against."""

    enable_files: bool = True
    enable_stats: bool = False

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    log_format: str = "text"
    """Access log format: 'text' (combined-log style) or 'json'."""

    server_name: str = "fileserver/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

            HTTP_HOST          bind address     (default: 127.0.0.1)
            HTTP_PORT          port             (default: 8080)
            HTTP_WEB_ROOT      web root         (default: ./web_root)
            HTTP_WORKERS       max workers      (default: 16)
            HTTP_TIMEOUT       socket timeout   (default: 30)
            HTTP_ENABLE_STATS  stats routes     (default: off)
            HTTP_LOG_LEVEL     logging level    (default: INFO)
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            web_root=os.getenv("HTTP_WEB_ROOT", "./web_root"),
            max_workers=int(os.getenv("HTTP_WORKERS", "16")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            enable_stats=_env_flag("HTTP_ENABLE_STATS", False),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails immediately instead of
        on the first request.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")

        if not self.web_root:
            raise ValueError("web_root must not be empty")

        if not (self.enable_files or self.enable_stats):
            raise ValueError("At least one of enable_files / enable_stats must be set")
