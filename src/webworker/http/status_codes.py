"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The worker answers every request with exactly one of two statuses:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   200 OK          The requested path is an existing regular file    │
    │   404 Not Found   Anything else (missing, directory, no GET line)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The status line on the wire looks like:

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └───────── Status code

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Status codes emitted by the connection worker.

    IntEnum so the members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
    """

    OK = 200
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase that follows the code in the status line."""
        return _STATUS_PHRASES[self]

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
