"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

Everything the connection worker needs to speak (a very small subset of)
HTTP/1.1:

    request.py        Read the request head, extract the GET path
    content_types.py  Path suffix → ContentType
    status_codes.py   200 / 404 with reason phrases
    response.py       Status line + header block
    content.py        Body: HTML template, image passthrough, 404 page

=============================================================================
"""

from .request import HTTPRequest, RequestParser, parse_request
from .content_types import ContentType, classify
from .status_codes import HTTPStatus
from .response import ResponseHeaderWriter, format_timestamp, status_line
from .content import (
    ContentWriter,
    NotFoundPageMissing,
    DATE_TAG,
    SERVER_TAG,
    substitute_tags,
)

__all__ = [
    # Request
    "HTTPRequest",
    "RequestParser",
    "parse_request",
    # Classification
    "ContentType",
    "classify",
    # Response head
    "HTTPStatus",
    "ResponseHeaderWriter",
    "format_timestamp",
    "status_line",
    # Response body
    "ContentWriter",
    "NotFoundPageMissing",
    "DATE_TAG",
    "SERVER_TAG",
    "substitute_tags",
]
