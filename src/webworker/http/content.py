"""
=============================================================================
RESPONSE CONTENT WRITING
=============================================================================

Streams the response body. This MUST run after the response head has been
written, and it picks exactly one of three branches:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    BRANCH SELECTION (in order)                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. found AND type == HTML                                          │
    │      └── TEMPLATE: copy line by line, replacing placeholders        │
    │                                                                      │
    │   2. found AND type is an image                                      │
    │      └── PASSTHROUGH: copy raw bytes through a fixed buffer         │
    │                                                                      │
    │   3. anything else                                                   │
    │      └── NOT FOUND: copy the fallback 404 page verbatim             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Note that an existing file with an UNKNOWN type lands in branch 3: the
status line says 200 (the file exists) but the body is the 404 page. That
is the established behavior of this server and is kept as-is.

=============================================================================
TEMPLATE PLACEHOLDERS
=============================================================================

HTML pages may contain two literal markers:

    <server-date>   →  current date-time (same format as the Date header)
    <server-id>     →  the configured server identity string

Replacement is plain substring replacement on each line. No regex, no
escaping, no other template syntax. Everything else, including line
endings, goes out byte for byte.

=============================================================================
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from .content_types import ContentType
from .response import format_timestamp


logger = logging.getLogger(__name__)


DATE_TAG = "<server-date>"
SERVER_TAG = "<server-id>"

_DATE_TAG_BYTES = DATE_TAG.encode("ascii")
_SERVER_TAG_BYTES = SERVER_TAG.encode("ascii")


class NotFoundPageMissing(Exception):
    """
    Raised when the fallback 404 page cannot be opened.

    This is a configuration problem. The current connection is abandoned
    without a body; there is no second-level fallback.
    """

    def __init__(self, path: Path):
        super().__init__(f"Not-found page is missing: {path}")
        self.path = path


def substitute_tags(line: bytes, server_id: str) -> bytes:
    """
    Replace the template placeholders in one line of HTML.

    Lines without a placeholder are returned unchanged (same object).

    Args:
        line: Raw line, including its line ending.
        server_id: Replacement for SERVER_TAG.

    Returns:
        The line with every occurrence of both placeholders replaced.
    """
    if _DATE_TAG_BYTES in line:
        line = line.replace(_DATE_TAG_BYTES, format_timestamp().encode("utf-8"))
    if _SERVER_TAG_BYTES in line:
        line = line.replace(_SERVER_TAG_BYTES, server_id.encode("utf-8"))
    return line


class ContentWriter:
    """
    Writes the response body for one connection.

    Usage:
        writer = ContentWriter(
            not_found_page=Path("test/404page.html"),
            server_id="PyWebWorker file server",
        )
        writer.write(out, ContentType.PNG, target.handle)
    """

    def __init__(
        self,
        not_found_page: Path,
        server_id: str,
        buffer_size: int = 16384,
        log_prefix: str = "",
    ):
        """
        Args:
            not_found_page: File streamed for every not-found body.
            server_id: Replacement text for the server placeholder.
            buffer_size: Copy buffer size for binary content.
            log_prefix: Prepended to log messages (connection id).
        """
        self.not_found_page = not_found_page
        self.server_id = server_id
        self.buffer_size = buffer_size
        self.log_prefix = log_prefix

    def write(self, out: BinaryIO, content_type: ContentType,
              source: Optional[BinaryIO]) -> None:
        """
        Stream the body that matches the already-written head.

        Args:
            out: Writable binary stream (the connection).
            content_type: Classified type of the requested path.
            source: Open handle of the requested file, or None if not found.

        Raises:
            NotFoundPageMissing: If the not-found branch runs and the
                                 fallback page does not exist.
            OSError: If writing to the connection fails.
        """
        if source is not None and content_type.is_html:
            self.write_template(out, source)
        elif source is not None and content_type.is_image:
            self.write_binary(out, source)
        else:
            self.write_not_found(out)

    def write_template(self, out: BinaryIO, source: BinaryIO) -> None:
        """Copy an HTML file line by line, substituting placeholders."""
        for line in source:
            out.write(substitute_tags(line, self.server_id))

    def write_binary(self, out: BinaryIO, source: BinaryIO) -> None:
        """Copy raw bytes unchanged."""
        shutil.copyfileobj(source, out, self.buffer_size)

    def write_not_found(self, out: BinaryIO) -> None:
        """Copy the fallback 404 page verbatim."""
        try:
            page = open(self.not_found_page, "rb")
        except OSError as e:
            raise NotFoundPageMissing(self.not_found_page) from e

        with page:
            shutil.copyfileobj(page, out, self.buffer_size)
