"""
=============================================================================
CORE: CONNECTIONS AND WORKERS
=============================================================================

    socket_server.py   Accept loop, hands out Connection objects
    connection.py      Socket wrapper: buffered streams, exactly-once close
    target.py          FileTarget: the requested file, resolved once
    worker.py          ConnectionWorker: one request, one response, close

    ┌──────────────┐   Connection   ┌──────────────────┐
    │ SocketServer │ ─────────────► │ ConnectionWorker │  (one thread each)
    └──────────────┘                └──────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .target import FileTarget
from .socket_server import SocketServer
from .worker import ConnectionWorker

__all__ = [
    "Connection",         # Wrapper for client socket
    "ConnectionState",    # Enum for connection lifecycle states
    "FileTarget",         # Requested file, resolved once per connection
    "SocketServer",       # TCP accept loop
    "ConnectionWorker",   # Serves one request on one connection
]
