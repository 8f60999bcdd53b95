"""
pytest configuration and fixtures.
"""

import os
import socket
import threading
from pathlib import Path
from typing import Callable, Generator, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webworker import WebServer, ServerConfig
from webworker.core import Connection, ConnectionWorker


NOT_FOUND_BODY = b"<html><body><h1>404 Not Found</h1></body></html>\n"

INDEX_HTML = (
    b"<html>\r\n"
    b"<head><title>Test</title></head>\r\n"
    b"<body>\r\n"
    b"<p>Date: <server-date></p>\r\n"
    b"<p>Server: <server-id> / <server-id></p>\r\n"
    b"</body>\r\n"
    b"</html>\r\n"
)

PLAIN_HTML = b"<html>\n<body>\n<p>No placeholders here.</p>\n</body>\n</html>"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /images/logo.png HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: image/png\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def image_bytes() -> bytes:
    """Random binary content, several copy buffers long."""
    return os.urandom(100_003)


@pytest.fixture
def doc_root(tmp_path: Path, image_bytes: bytes) -> Path:
    """
    Document root with one file of every kind.

        www/
        ├── index.html       (with placeholders)
        ├── plain.html       (no placeholders)
        ├── image.png        (random bytes)
        ├── photo.JPG
        ├── favicon.ico
        ├── anim.gif
        ├── notes.txt        (unknown type)
        └── docs/            (directory)
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "plain.html").write_bytes(PLAIN_HTML)
    (root / "image.png").write_bytes(image_bytes)
    (root / "photo.JPG").write_bytes(image_bytes[:5000])
    (root / "favicon.ico").write_bytes(image_bytes[:1500])
    (root / "anim.gif").write_bytes(image_bytes[:2500])
    (root / "notes.txt").write_bytes(b"just some text\n")
    (root / "docs").mkdir()
    (root / "docs" / "page.html").write_bytes(PLAIN_HTML)
    return root


@pytest.fixture
def not_found_page(tmp_path: Path) -> Path:
    """Fallback page, outside the document root."""
    page = tmp_path / "404page.html"
    page.write_bytes(NOT_FOUND_BODY)
    return page


@pytest.fixture
def config(doc_root: Path, not_found_page: Path) -> ServerConfig:
    """Test configuration serving doc_root."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        root_dir=str(doc_root),
        not_found_page=str(not_found_page),
        buffer_size=4096,
        server_name="TestServer/1.0",
        server_id="Test Server",
        log_level="WARNING",
    )


def read_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> Tuple[str, dict, bytes]:
    """Split a raw response into (status line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name] = value.strip()
    return lines[0], headers, body


class WorkerHarness:
    """
    Runs a ConnectionWorker over a socketpair.

    The worker gets one end as its Connection, the test drives the other.
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self.worker: ConnectionWorker = None
        self.connection: Connection = None

    def exchange(self, request: bytes, half_close: bool = False) -> bytes:
        """
        Send `request`, return everything the worker wrote before closing.

        Args:
            request: Raw bytes to send.
            half_close: Shut down our write side after sending.
        """
        server_sock, client_sock = socket.socketpair()
        self.connection = Connection(socket=server_sock, read_timeout=self.config.read_timeout)
        self.worker = ConnectionWorker(self.connection, self.config)

        thread = threading.Thread(target=self.worker.run, daemon=True)
        thread.start()

        with client_sock:
            client_sock.settimeout(5.0)
            if request:
                client_sock.sendall(request)
            if half_close:
                client_sock.shutdown(socket.SHUT_WR)
            raw = read_all(client_sock)

        thread.join(timeout=5.0)
        assert not thread.is_alive(), "worker did not finish"
        return raw


@pytest.fixture
def harness(config: ServerConfig) -> WorkerHarness:
    """Worker harness bound to the test configuration."""
    return WorkerHarness(config)


@pytest.fixture
def get(harness: WorkerHarness) -> Callable[[str], Tuple[str, dict, bytes]]:
    """Send `GET <path>` and return the split response."""
    def _get(path: str):
        request = (
            f"GET {path} HTTP/1.1\r\n"
            "Host: localhost\r\n"
            "User-Agent: pytest\r\n"
            "\r\n"
        ).encode()
        return split_response(harness.exchange(request))
    return _get


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Open a connection, send raw bytes, read until close."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(raw)
            return read_all(sock)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server on a free port."""
    test_srv = TestServer(WebServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
