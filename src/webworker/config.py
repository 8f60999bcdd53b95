"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server and its connection workers.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m webworker --port 3000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEBWORKER_PORT=3000 python -m webworker                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A worker only ever READS its configuration. One ServerConfig instance is
shared by every connection thread, so nothing in here may be mutated once
the server is running.

=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, read_timeout

    FILE SERVING
    - root_dir, not_found_page, buffer_size, max_request_size

    SERVER IDENTITY
    - server_name (Server header), server_id (HTML template value)

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
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections.
    """

    read_timeout: Optional[float] = None
    """
    Timeout in seconds while waiting for request bytes.
    None = block until the client sends the blank line (or disconnects).
    A worker that times out answers with the 404 page.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILE SERVING
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "www"
    """
    Directory that request paths are resolved against.
    """

    not_found_page: str = "www/404.html"
    """
    File streamed as the body of every not-found response.
    Relative paths are resolved against the process working directory.
    """

    buffer_size: int = 16384
    """
    Copy buffer for image passthrough (16 KB default).
    """

    max_request_size: int = 64 * 1024
    """
    Upper bound for the request head in bytes.
    Anything bigger is treated like a failed read.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "PyWebWorker/1.0"
    """
    Value of the Server response header.
    """

    server_id: str = "PyWebWorker file server"
    """
    Text substituted for the server placeholder in served HTML pages.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG also prints every request line received.
    """

    @property
    def root_path(self) -> Path:
        """Absolute, normalized document root."""
        return Path(self.root_dir).resolve()

    @property
    def not_found_path(self) -> Path:
        """Path of the fallback page (relative to the working directory)."""
        return Path(self.not_found_page)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEBWORKER_HOST            Server host (default: 127.0.0.1)
        WEBWORKER_PORT            Server port (default: 8080)
        WEBWORKER_ROOT            Document root (default: www)
        WEBWORKER_NOT_FOUND_PAGE  Fallback page (default: www/404.html)
        WEBWORKER_READ_TIMEOUT    Request read timeout in seconds (default: none)
        WEBWORKER_LOG_LEVEL       Logging level (default: INFO)

        =====================================================================
        """
        read_timeout = os.getenv("WEBWORKER_READ_TIMEOUT")
        return cls(
            host=os.getenv("WEBWORKER_HOST", "127.0.0.1"),
            port=int(os.getenv("WEBWORKER_PORT", "8080")),
            root_dir=os.getenv("WEBWORKER_ROOT", "www"),
            not_found_page=os.getenv("WEBWORKER_NOT_FOUND_PAGE", "www/404.html"),
            read_timeout=float(read_timeout) if read_timeout else None,
            log_level=os.getenv("WEBWORKER_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once by the server at startup. Workers never call it, so a
        fallback page deleted while the server runs is still caught per
        connection.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ValueError("read_timeout must be > 0")

        if not self.root_path.is_dir():
            raise ValueError(f"Document root does not exist: {self.root_dir}")

        if not self.not_found_path.is_file():
            raise ValueError(f"Not-found page does not exist: {self.not_found_page}")
