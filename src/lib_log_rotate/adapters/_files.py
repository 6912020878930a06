"""Low-level file openers shared by the log writer and the rotation engine.

Both helpers go through :func:`os.open` so newly created files get the
``0o644`` permission bits (subject to the process umask) instead of the
``0o666`` default of :func:`open`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

FILE_MODE = 0o644


def open_append(path: Path) -> BinaryIO:
    """Open ``path`` for appending, creating it when absent."""
    fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, FILE_MODE)
    return _wrap(fd, "ab")


def open_truncated(path: Path) -> BinaryIO:
    """Open ``path`` for writing after clearing any previous content."""
    fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, FILE_MODE)
    return _wrap(fd, "wb")


def _wrap(fd: int, mode: str) -> BinaryIO:
    try:
        return os.fdopen(fd, mode)
    except BaseException:
        os.close(fd)
        raise


__all__ = ["FILE_MODE", "open_append", "open_truncated"]
