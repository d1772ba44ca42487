"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables of the server in one dataclass.

    ServerConfig(
        host="127.0.0.1",        # Interface to bind
        port=4221,               # 0 lets the OS pick (tests)
        directory="/tmp/data",   # Base directory of the /files route
    )

Values come from the CLI (python -m minihttp --directory ...), from code,
or, opt-in, from the environment via ServerConfig.from_env().

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
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

    HTTP SETTINGS
    - max_body_size, canonical_headers

    FILES
    - directory

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 4221
    """The port number to listen on. 0 = any free port."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 8192
    """Read buffer of the per-connection stream, in bytes."""

    timeout: Optional[float] = None
    """
    Socket timeout per connection, in seconds.
    None = blocking: a silent client holds its thread indefinitely.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    max_body_size: int = 10 * 1024 * 1024  # 10 MB
    """Largest Content-Length accepted; bigger requests fail to parse."""

    canonical_headers: bool = False
    """
    Rewrite request header names to Dash-Title-Case before routing.
    Off by default: lookups are exact-case ("User-Agent" but not
    "user-agent"). Turn on for clients that send lower-case names.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "."
    """Base directory of the /files route, used verbatim as a prefix."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = "minihttp/1.0"
    """Name shown in the startup log line."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST       Server host (default: 127.0.0.1)
        HTTP_PORT       Server port (default: 4221)
        HTTP_DIRECTORY  Files directory (default: .)
        HTTP_TIMEOUT    Socket timeout in seconds (default: none)
        HTTP_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("HTTP_TIMEOUT")
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "4221")),
            directory=os.getenv("HTTP_DIRECTORY", "."),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        """The log level as a logging module constant."""
        return getattr(logging, self.log_level.upper())

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so mistakes fail fast instead of on
        the first request.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_body_size < 0:
            raise ValueError("max_body_size must be >= 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Type-safe configuration with dataclass
# 2. Optional environment variable support
# 3. Validation at startup (fail-fast)
# 4. Defaults match the conventional "--directory" server on port 4221
# =============================================================================
