"""
=============================================================================
HTTP RESPONSE HEADER WRITING
=============================================================================

Writes the status line and header block that start every response.

=============================================================================
RESPONSE HEAD FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                       ← Status line
    Date: Sat Oct 17 14:03:11 2026\r\n        ← Locale date-time
    Server: PyWebWorker/1.0\r\n               ← Fixed identity
    Connection: close\r\n                     ← One request per connection
    Content-Type: image/png\r\n               ← From ContentType (may be empty)
    \r\n                                      ← Empty line: head ends
    <body bytes...>

There is NO Content-Length header. The body is streamed straight from
disk and the end of the body is signalled by closing the connection,
which is exactly what "Connection: close" announces.

=============================================================================
STATUS SELECTION
=============================================================================

    found          →  200 OK
    otherwise      →  404 Not Found

The writer never touches the filesystem. It is told whether the file was
found by the caller, which resolved the target once for this connection.

=============================================================================
"""

import logging
from datetime import datetime
from typing import BinaryIO, Optional

from .content_types import ContentType
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


HTTP_VERSION = "HTTP/1.1"


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime as a locale-appropriate long date-time string.

    Used for the Date header and for the date placeholder in HTML pages.
    "%c" is the date and time representation of the process's LC_TIME
    locale, in the server's local time zone. The CLI sets LC_TIME from
    the environment at startup; an embedding application that never calls
    locale.setlocale() gets the C locale format shown below.

    Args:
        dt: Datetime to format. Defaults to now.

    Returns:
        Formatted date string, e.g. "Sat Oct 17 14:03:11 2026".
    """
    if dt is None:
        dt = datetime.now().astimezone()
    return dt.strftime("%c")


def status_line(status: HTTPStatus) -> str:
    """
    Build the status line for a status code.

        >>> status_line(HTTPStatus.NOT_FOUND)
        'HTTP/1.1 404 Not Found'
    """
    return f"{HTTP_VERSION} {status.value} {status.phrase}"


class ResponseHeaderWriter:
    """
    Writes the response head for one connection.

    Usage:
        writer = ResponseHeaderWriter(server_name="PyWebWorker/1.0")
        status = writer.write(out, ContentType.HTML, found=True)
    """

    def __init__(self, server_name: str, log_prefix: str = ""):
        self.server_name = server_name
        self.log_prefix = log_prefix

    @staticmethod
    def status_for(found: bool) -> HTTPStatus:
        """Status implied by whether the requested file exists."""
        return HTTPStatus.OK if found else HTTPStatus.NOT_FOUND

    def build(self, status: HTTPStatus, content_type: ContentType,
              now: Optional[datetime] = None) -> bytes:
        """
        Serialize the status line and headers, including the empty line.

        Args:
            status: Response status.
            content_type: Classified type; its MIME string is sent verbatim.
            now: Timestamp for the Date header (defaults to now).

        Returns:
            The complete response head as bytes.
        """
        lines = [
            status_line(status),
            f"Date: {format_timestamp(now)}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {content_type.mime_type}",
            "",  # Empty line separates head from body
        ]
        return "\r\n".join(lines).encode("utf-8") + b"\r\n"

    def write(self, out: BinaryIO, content_type: ContentType,
              found: bool) -> HTTPStatus:
        """
        Write the response head to the output stream.

        Args:
            out: Writable binary stream (the connection).
            content_type: Classified type of the requested path.
            found: Whether the requested path is an existing regular file.

        Returns:
            The status that was written.
        """
        status = self.status_for(found)
        if status.is_error:
            logger.debug(f"{self.log_prefix}File not found, sending 404 page")

        out.write(self.build(status, content_type))
        return status
