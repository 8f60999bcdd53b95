"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with buffered streams and a guaranteed,
exactly-once close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

    Client sends:
        "GET /index.html HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /ind"
        recv() → "ex.html HTTP/1.1\r\nHo"
        recv() → "st: x\r\n\r\n"

Instead of reassembling chunks by hand we wrap the socket in buffered file
objects (socket.makefile). readline() on the reader keeps calling recv()
until a full line is available, and write() on the writer buffers output
until flush().

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──────► READING ──────► WRITING ──────► CLOSING ──────► CLOSED
     │             │               │                ▲
     └─────────────┴───────────────┴────────────────┘
                  (any error goes straight to CLOSING)

There is no keep-alive: one request, one response, then close.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)

# Bounds on discarding unread client input during close()
DRAIN_TIMEOUT = 0.5
MAX_DRAIN_BYTES = 64 * 1024


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"              # Just accepted, nothing read yet
    READING = "reading"      # Reading the request head
    WRITING = "writing"      # Sending head and body
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents one accepted client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. BUFFERED STREAMS                                                 │
    │     └── reader: blocking readline() over the socket                  │
    │     └── writer: buffered writes, flushed once at the end            │
    │                                                                      │
    │  2. READ TIMEOUT                                                     │
    │     └── None (default) blocks until the client sends the head       │
    │     └── A number turns a stalled client into a socket.timeout       │
    │                                                                      │
    │  3. GRACEFUL CLOSE, EXACTLY ONCE                                     │
    │     └── flush → shutdown(SHUT_WR) → drain → close                   │
    │     └── Safe to call again; later calls are no-ops                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple (empty for socketpair sockets).
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple = ()

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    read_timeout: Optional[float] = None

    # Lazily created streams (not shown in repr for cleaner logs)
    _reader: Optional[BinaryIO] = field(default=None, repr=False)
    _writer: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Apply the read timeout (None keeps the socket fully blocking)."""
        self.socket.settimeout(self.read_timeout)

    # =========================================================================
    # PROPERTIES: Convenient accessors
    # =========================================================================

    @property
    def client(self) -> str:
        """Printable client address."""
        if len(self.address) >= 2:
            return f"{self.address[0]}:{self.address[1]}"
        return "local"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def reader(self) -> BinaryIO:
        """Buffered binary reader over the socket."""
        if self._reader is None:
            self._reader = self.socket.makefile("rb")
        self.state = ConnectionState.READING
        return self._reader

    @property
    def writer(self) -> BinaryIO:
        """Buffered binary writer over the socket."""
        if self._writer is None:
            self._writer = self.socket.makefile("wb")
        self.state = ConnectionState.WRITING
        return self._writer

    # =========================================================================
    # CLOSING: Properly terminate the connection
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. Flush and close the writer (pending response bytes go out)
        2. shutdown(SHUT_WR): client sees EOF, the body is complete
        3. Drain what the client still sends (bounded by time and bytes)
        4. close(): release the file descriptor

        Errors here mean the client is already gone; they are logged at
        DEBUG and otherwise ignored.
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return  # Already closed

        self.state = ConnectionState.CLOSING

        if self._writer is not None:
            try:
                self._writer.close()  # Flushes first
            except OSError as e:
                logger.debug(f"[{self.id}] Flush on close failed: {e}")

        if self._reader is not None:
            self._reader.close()

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self._drain()
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f} ms")

    def _drain(self):
        """Discard what the client still sends, up to a byte and time limit."""
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        while drained < MAX_DRAIN_BYTES:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            self.socket.settimeout(remaining)
            chunk = self.socket.recv(4096)
            if not chunk:
                break
            drained += len(chunk)

        if drained >= MAX_DRAIN_BYTES:
            logger.debug(f"[{self.id}] Stopped draining after {drained} bytes")

    # =========================================================================
    # CONTEXT MANAGER: For use with 'with' statement
    # =========================================================================

    def __enter__(self):
        """
        Allows using Connection with 'with' statement for automatic cleanup:

            with conn:
                request = parser.parse(conn.reader)
                conn.writer.write(head)
            # Connection closed here, on every exit path
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
