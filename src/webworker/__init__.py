"""
=============================================================================
WEBWORKER - Minimal HTTP/1.1 File Server
=============================================================================

Each accepted connection gets its own worker thread. The worker reads one
GET request line, works out the content type from the path suffix,
writes a status line and four headers, streams the file, and closes the
connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHAT A WORKER SERVES                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   *.html                   → text/html, placeholders substituted    │
    │   *.jpg *.jpeg *.gif       → image/*, bytes copied unchanged        │
    │   *.png *.ico                                                        │
    │   missing / directory /    → the configured 404 page                │
    │   unknown suffix                                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    webworker/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m webworker)
    ├── server.py            # WebServer: accept loop + worker threads
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # TCP accept loop
    │   ├── connection.py    # Connection wrapper
    │   ├── target.py        # FileTarget (single filesystem check)
    │   └── worker.py        # ConnectionWorker
    └── http/
        ├── request.py       # Request head parsing
        ├── content_types.py # ContentType enum + classifier
        ├── status_codes.py  # 200 / 404
        ├── response.py      # Status line + headers
        └── content.py       # Body writer (template / binary / 404)

=============================================================================
QUICK START
=============================================================================

    from webworker import WebServer, ServerConfig

    server = WebServer(ServerConfig(port=8080, root_dir="./www"))
    server.run()

Or from a shell:

    python -m webworker --root ./www --not-found-page ./www/404.html

=============================================================================
"""

__version__ = "1.0.0"

from .server import WebServer
from .config import ServerConfig
from .core import ConnectionWorker, Connection

__all__ = ["WebServer", "ServerConfig", "ConnectionWorker", "Connection", "__version__"]
