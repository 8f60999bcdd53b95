"""
=============================================================================
FILE TARGET RESOLUTION
=============================================================================

Resolves the requested path against the document root exactly ONCE per
connection. The status line and the response body are both derived from
the same FileTarget, so they can never disagree.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE CHECK, TWO CONSUMERS                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   FileTarget.open(root, "img/a.png")                                │
    │        │                                                             │
    │        ├── os.open(path, O_NONBLOCK) → fd (or not found)            │
    │        └── os.fstat(fd)              → regular file? (or not found) │
    │                                                                      │
    │   ResponseHeaderWriter ── target.found ──► 200 / 404                │
    │   ContentWriter        ── target.handle ─► bytes of THAT file       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The metadata comes from fstat() on the already-open descriptor, not from a
second lookup by name. If the file is replaced on disk after we opened it
we still serve the bytes we checked.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /../../etc/passwd

resolve() normalizes ".." and follows symlinks. If the result is not
inside the document root the target is simply "not found".

=============================================================================
"""

import logging
import os
import stat
from pathlib import Path
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)

# O_NONBLOCK keeps open() from waiting on a FIFO with no writer
_NONBLOCK = getattr(os, "O_NONBLOCK", 0)
_OPEN_FLAGS = os.O_RDONLY | _NONBLOCK | getattr(os, "O_BINARY", 0)


class FileTarget:
    """
    The requested file, resolved and (if it exists) opened.

    Attributes:
        path: Absolute filesystem path the request resolved to.
        handle: Open binary handle, or None when not found.
        found: True when the path is an existing regular (non-directory) file.

    Usage:
        with FileTarget.open(root, request.path) as target:
            if target.found:
                shutil.copyfileobj(target.handle, out)
    """

    def __init__(self, path: Path, handle: Optional[BinaryIO] = None):
        self.path = path
        self.handle = handle
        # Fixed at resolution time; stays valid after close()
        self.found = handle is not None

    @classmethod
    def open(cls, root: Path, requested_path: str) -> "FileTarget":
        """
        Resolve and open a requested path.

        Never raises for a missing, unreadable or non-regular file; those
        all produce a target with found == False.

        Args:
            root: Absolute document root.
            requested_path: Path from the request line, no leading "/".

        Returns:
            A FileTarget (use it as a context manager to close the handle).
        """
        root = root.resolve()
        try:
            full_path = (root / requested_path).resolve()
        except (OSError, RuntimeError, ValueError):
            # Symlink loop or embedded NUL byte
            return cls(root / requested_path)

        try:
            full_path.relative_to(root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {requested_path}")
            return cls(full_path)

        try:
            fd = os.open(full_path, _OPEN_FLAGS)
        except (OSError, ValueError):
            # Missing, not readable, or an embedded NUL byte
            return cls(full_path)

        try:
            is_regular = stat.S_ISREG(os.fstat(fd).st_mode)
        except OSError:
            os.close(fd)
            raise

        if not is_regular:
            # Directory, FIFO, device or socket
            os.close(fd)
            return cls(full_path)

        if _NONBLOCK:
            os.set_blocking(fd, True)
        return cls(full_path, os.fdopen(fd, "rb"))

    def close(self):
        if self.handle is not None:
            self.handle.close()
            self.handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return f"FileTarget(path={str(self.path)!r}, found={self.found})"
