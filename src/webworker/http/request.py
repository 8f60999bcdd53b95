"""
=============================================================================
HTTP REQUEST LINE PARSING
=============================================================================

The worker only needs ONE thing from the request: the path of the file to
serve. Everything else in the request head is read and thrown away.

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /images/logo.png HTTP/1.1\r\n     ← only line we look at   │
    │      └──────────────┘                                            │
    │       requested path  → "images/logo.png" (leading / stripped)   │
    │  Host: localhost:8080\r\n              ← read, ignored           │
    │  User-Agent: curl/8.5.0\r\n            ← read, ignored           │
    │  \r\n                                  ← empty line: stop here   │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
BLOCKING READS, NOT POLLING
=============================================================================

Bytes may trickle in slowly. We read from a buffered file object wrapped
around the socket (socket.makefile("rb")), so readline() simply blocks
this worker's thread until a full line (or EOF) is available. Other
connections run in their own threads and are not affected.

=============================================================================
FAILURE MODEL
=============================================================================

Parsing never raises. Any I/O error (reset, timeout, oversized head)
produces an EMPTY request, which the worker answers with the 404 page:

    read ok, GET seen          → HTTPRequest("GET", "index.html")
    read ok, no GET line       → HTTPRequest("", "")
    OSError / head too large   → HTTPRequest("", "")

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO


logger = logging.getLogger(__name__)


GET_TOKEN = "GET"


class HTTPParseError(Exception):
    """
    Raised internally when the request head cannot be read.

    Never escapes RequestParser.parse(); it is converted to an empty request.
    """


@dataclass(frozen=True)
class HTTPRequest:
    """
    The part of an HTTP request the worker cares about.

    Attributes:
        method: "GET" when a GET line was seen, otherwise "".
        path:   Requested path with the leading "/" removed, or "".
    """

    method: str = ""
    path: str = ""

    @property
    def is_empty(self) -> bool:
        """True when no GET line was parsed."""
        return not self.method


EMPTY_REQUEST = HTTPRequest()


class RequestParser:
    """
    Line-oriented reader for the HTTP request head.

    Usage:
        parser = RequestParser(max_request_size=64 * 1024)
        request = parser.parse(sock.makefile("rb"))
        request.path  # "index.html"
    """

    def __init__(self, max_request_size: int = 64 * 1024, log_prefix: str = ""):
        """
        Args:
            max_request_size: Upper bound for the whole head in bytes.
            log_prefix: Prepended to log messages (connection id).
        """
        self.max_request_size = max_request_size
        self.log_prefix = log_prefix

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Read lines until the blank line that ends the request head.

        Args:
            stream: Readable binary stream delivering the request.

        Returns:
            The parsed request, or EMPTY_REQUEST if the read failed.
        """
        try:
            return self._read_head(stream)
        except (OSError, HTTPParseError) as e:
            logger.warning(f"{self.log_prefix}Request error: {e}")
            return EMPTY_REQUEST

    def _read_head(self, stream: BinaryIO) -> HTTPRequest:
        request = EMPTY_REQUEST
        bytes_read = 0

        while True:
            # Read one more byte than allowed so an oversized line is detected
            raw = stream.readline(self.max_request_size - bytes_read + 1)
            if not raw:
                # EOF before the blank line: keep whatever we captured
                logger.debug(f"{self.log_prefix}Client closed before end of request head")
                return request

            bytes_read += len(raw)
            if bytes_read > self.max_request_size:
                raise HTTPParseError(f"Request head exceeds {self.max_request_size} bytes")

            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            logger.debug(f"{self.log_prefix}Request line: ({line})")

            if not line:
                return request

            if request.is_empty and line[:3] == GET_TOKEN:
                request = HTTPRequest(method=GET_TOKEN, path=extract_path(line))


def extract_path(line: str) -> str:
    """
    Pull the requested path out of a GET request line.

    The path is the text after "GET" and one separator, up to the next
    space, with its leading "/" removed.

    Examples:
        >>> extract_path("GET /index.html HTTP/1.1")
        'index.html'

        >>> extract_path("GET /")
        ''
    """
    target = line[len(GET_TOKEN) + 1:].split(" ", 1)[0]
    if target.startswith("/"):
        target = target[1:]
    return target


def parse_request(stream: BinaryIO, max_request_size: int = 64 * 1024) -> HTTPRequest:
    """
    Convenience function to parse a request head from a stream.

    Creates a one-off parser. Prefer RequestParser when a log prefix is
    wanted.
    """
    return RequestParser(max_request_size=max_request_size).parse(stream)
