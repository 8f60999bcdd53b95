"""
=============================================================================
CONNECTION WORKER
=============================================================================

One ConnectionWorker handles one accepted connection from start to finish
and then ends. It runs in its own thread, so it only ever has to think
about a single client; nothing here is shared with other workers.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ConnectionWorker.run()                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   with connection:                                                   │
    │       │                                                              │
    │       ├──► RequestParser.parse(reader)     "GET /a.png" → "a.png"   │
    │       ├──► classify("a.png")               → ContentType.PNG        │
    │       │                                                              │
    │       └──► with FileTarget.open(root, "a.png"):   ← ONE fs check    │
    │               ├──► ResponseHeaderWriter.write()   200 / 404 head     │
    │               ├──► ContentWriter.write()          body               │
    │               └──► writer.flush()                                    │
    │                                                                      │
    │   (connection closed here, whatever happened above)                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR CONTAINMENT
=============================================================================

Nothing a worker does may take down the accept loop or another worker:

    Request read fails      → parser returns an empty request → 404
    Client disconnects      → OSError on write, logged, connection closed
    404 page missing        → NotFoundPageMissing, logged, connection closed
    Anything unexpected     → logged with traceback, connection closed

Every response is attempted exactly once. There are no retries.

=============================================================================
"""

import logging
import time
from typing import Optional

from ..config import ServerConfig
from ..http.request import HTTPRequest, RequestParser
from ..http.content_types import classify
from ..http.status_codes import HTTPStatus
from ..http.response import ResponseHeaderWriter
from ..http.content import ContentWriter, NotFoundPageMissing
from .connection import Connection
from .target import FileTarget


logger = logging.getLogger(__name__)


class ConnectionWorker:
    """
    Serves a single HTTP request on a single connection.

    Usage:
        worker = ConnectionWorker(conn, config)
        threading.Thread(target=worker.run, daemon=True).start()

    After run() returns the connection is closed and the worker is done.
    Calling run() a second time is not supported.
    """

    def __init__(self, connection: Connection, config: Optional[ServerConfig] = None):
        """
        Args:
            connection: The accepted client connection (owned by the worker).
            config: Server configuration, shared read-only between workers.
        """
        self.connection = connection
        self.config = config or ServerConfig()

        prefix = f"[{connection.id}] "
        self._parser = RequestParser(
            max_request_size=self.config.max_request_size,
            log_prefix=prefix,
        )
        self._header_writer = ResponseHeaderWriter(
            server_name=self.config.server_name,
            log_prefix=prefix,
        )
        self._content_writer = ContentWriter(
            not_found_page=self.config.not_found_path,
            server_id=self.config.server_id,
            buffer_size=self.config.buffer_size,
            log_prefix=prefix,
        )

        # Filled in by run(), kept for logging and tests
        self.request: Optional[HTTPRequest] = None
        self.status: Optional[HTTPStatus] = None

    def run(self) -> None:
        """
        Worker thread starting point.

        Never raises: every failure is logged and ends with the connection
        closed.
        """
        conn = self.connection
        started = time.perf_counter()
        logger.debug(f"[{conn.id}] Handling connection from {conn.client}")

        try:
            with conn:
                self._serve()
        except NotFoundPageMissing as e:
            logger.error(f"[{conn.id}] {e}")
        except OSError as e:
            # Client went away mid-response
            logger.warning(f"[{conn.id}] Output error: {e}")
        except Exception as e:
            logger.exception(f"[{conn.id}] Unexpected error: {e}")

        elapsed_ms = (time.perf_counter() - started) * 1000
        method = (self.request.method if self.request else "") or "-"
        path = self.request.path if self.request else ""
        status = self.status.value if self.status else "-"
        logger.info(f"[{conn.id}] {method} /{path} -> {status} ({elapsed_ms:.1f} ms)")

    def _serve(self) -> None:
        conn = self.connection

        self.request = self._parser.parse(conn.reader)
        content_type = classify(self.request.path)

        with FileTarget.open(self.config.root_path, self.request.path) as target:
            out = conn.writer
            self.status = self._header_writer.write(out, content_type, target.found)
            self._content_writer.write(out, content_type, target.handle)
            out.flush()
