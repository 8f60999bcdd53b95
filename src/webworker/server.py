"""
=============================================================================
WEB SERVER
=============================================================================

Ties the accept loop to the connection workers.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WEB SERVER ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │     ┌──────────────┐                                                 │
    │     │  WebServer   │  validate config, set up logging               │
    │     └──────┬───────┘                                                 │
    │            │                                                         │
    │            ▼                                                         │
    │     ┌──────────────┐   accept()   ┌──────────────────────────┐      │
    │     │ SocketServer │ ───────────► │ Thread: ConnectionWorker │      │
    │     └──────────────┘      │       └──────────────────────────┘      │
    │                           │       ┌──────────────────────────┐      │
    │                           └─────► │ Thread: ConnectionWorker │      │
    │                                   └──────────────────────────┘      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY A THREAD PER CONNECTION?
=============================================================================

A worker may sit in a blocking read for as long as its client takes to
send the request head. With a fixed-size pool, a handful of slow clients
could occupy every worker and stall everyone else. One thread per
connection means a slow client only ever blocks its own thread.

Workers share nothing but the read-only config and the filesystem, so no
locks are needed.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionWorker


logger = logging.getLogger(__name__)


class WebServer:
    """
    Multi-threaded static file server.

    Usage:
        server = WebServer(ServerConfig(port=8080, root_dir="./www"))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid (fail fast).
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._running = False

    @property
    def address(self):
        """Bound (host, port) once running."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self, configure_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Set up root logging from config.log_level.
                               Disable when embedding in an app (or tests)
                               that configures logging itself.
        """
        if configure_logging:
            self._setup_logging()

        self._running = True
        logger.info(
            f"Serving {self.config.root_path} "
            f"(404 page: {self.config.not_found_page})"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight workers run to completion."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is up."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("webworker").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """
        Start a worker thread for a freshly accepted connection.

        Called by SocketServer on the accept thread; returns immediately.
        """
        worker = ConnectionWorker(conn, self.config)
        thread = threading.Thread(
            target=worker.run,
            name=f"worker-{conn.id}",
            daemon=True,
        )
        thread.start()
