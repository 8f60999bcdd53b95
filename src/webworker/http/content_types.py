"""
=============================================================================
CONTENT TYPE CLASSIFICATION
=============================================================================

Maps the requested path to one of a small, closed set of content kinds.
The kind decides two things:

1. The Content-Type response header
2. Which content branch streams the body (template, passthrough, 404)

    ┌────────────────────────────────────────────────────────────────────┐
    │                    SUPPORTED TYPES                                 │
    ├────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  .jpg / .jpeg  → image/jpeg     ┐                                  │
    │  .gif          → image/gif      │  binary passthrough              │
    │  .png          → image/png      │                                  │
    │  .ico          → image/x-icon   ┘                                  │
    │  .html         → text/html         template substitution           │
    │  (anything)    → ""                not-found page                  │
    │                                                                     │
    └────────────────────────────────────────────────────────────────────┘

Matching is on the suffix and case-insensitive, so "LOGO.PNG" and
"logo.png" are the same type. Unknown suffixes do NOT fall back to
application/octet-stream: the header carries an empty type and the body
is the not-found page.

=============================================================================
"""

from enum import Enum


class ContentType(Enum):
    """
    Closed set of content kinds the worker knows how to serve.

    The value of each member is its MIME type string. UNKNOWN has an empty
    MIME type, which is written to the Content-Type header as-is.
    """

    JPEG = "image/jpeg"
    GIF = "image/gif"
    PNG = "image/png"
    ICON = "image/x-icon"
    HTML = "text/html"
    UNKNOWN = ""

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def is_image(self) -> bool:
        return self.value.startswith("image/")

    @property
    def is_html(self) -> bool:
        return self is ContentType.HTML


# =============================================================================
# SUFFIX TABLE
# =============================================================================
#
# Checked in this order, first match wins.
#
# =============================================================================

_SUFFIXES = (
    ((".jpeg", ".jpg"), ContentType.JPEG),
    ((".gif",), ContentType.GIF),
    ((".png",), ContentType.PNG),
    ((".ico",), ContentType.ICON),
    ((".html",), ContentType.HTML),
)


def classify(path: str) -> ContentType:
    """
    Classify a request path by its file-extension suffix.

    Args:
        path: The requested path (leading slash already stripped or not,
              it makes no difference).

    Returns:
        The matching ContentType, or ContentType.UNKNOWN.

    Examples:
        >>> classify("images/Photo.JPG")
        <ContentType.JPEG: 'image/jpeg'>

        >>> classify("index.html")
        <ContentType.HTML: 'text/html'>

        >>> classify("notes.txt")
        <ContentType.UNKNOWN: ''>
    """
    lowered = path.lower()  # .PNG → .png
    for suffixes, content_type in _SUFFIXES:
        if lowered.endswith(suffixes):
            return content_type
    return ContentType.UNKNOWN
