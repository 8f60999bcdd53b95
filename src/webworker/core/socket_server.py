"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Listens for incoming connections and hands each accepted socket, wrapped
in a Connection, to a callback. It knows nothing about HTTP.

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create a socket file descriptor
    2. bind()      Associate the socket with an IP:PORT
    3. listen()    Start queueing incoming connections (backlog)
    4. accept()    Wait for a connection, get a NEW socket for it
    5. close()     Release the listening socket on shutdown

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘
                                │
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    ┌───────────┐         ┌───────────┐         ┌───────────┐
    │ Client 1  │         │ Client 2  │         │ Client 3  │
    │ (worker)  │         │ (worker)  │         │ (worker)  │
    └───────────┘         └───────────┘         └───────────┘

=============================================================================
SIGNAL HANDLING
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (docker stop, kill) stop the accept loop.
Python only allows installing signal handlers from the main thread, so
when the server runs in a background thread (as in the tests) the
handlers are skipped and shutdown() must be called directly.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(handler)                                                    │
    │        ├──► _create_socket()   SO_REUSEADDR, TCP_NODELAY            │
    │        ├──► bind() + listen()                                        │
    │        ├──► _setup_signals()   (main thread only)                   │
    │        ├──► _ready_event.set()                                       │
    │        └──► _accept_loop()     blocks until shutdown()               │
    │                 └──► accept() → Connection → handler(conn)           │
    │                                                                      │
    │    shutdown()        _running = False                                │
    │    _cleanup()        restore signals, close socket                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        def serve(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(serve)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, read_timeout).

        The socket is created lazily in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None

        # Set once the socket is listening; tests wait on it
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The server's bound (IP, port).

        With port 0 in the config this is the port the OS picked, once the
        server is listening.
        """
        if self._bound_address:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoids "Address already in use" when restarting the server
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Send response bytes immediately
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up every second to check the running flag
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers for graceful shutdown."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Receives each new Connection. It must not
                                block the accept loop for long (the web
                                server hands the connection to a thread).
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._setup_signals()

        host, port = self._bound_address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Main loop for accepting connections.

        A failing handler is logged and the loop keeps going; only a
        socket error on the listening socket ends it.
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Timeout is normal: check self._running and loop again
                continue
            except OSError as e:
                # Usually means we're shutting down
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    read_timeout=self.config.read_timeout,
                )
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"Failed to dispatch connection from {client_address[0]}: {e}")
                client_socket.close()

    def shutdown(self):
        """
        Initiate graceful shutdown.

        Safe to call from a signal handler or another thread, and safe to
        call more than once.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the server is listening.

        Returns:
            True if the server is ready, False on timeout.
        """
        return self._ready_event.wait(timeout)
