"""Rotation engine deriving the view file and archiving oversized logs.

Purpose
-------
After every write the primary log is re-read, its lines are written to the
view file most-recent-first, and once the primary grows past the size
threshold it is deleted and the view file is frozen under a timestamped name.

Contents
--------
* :data:`DEFAULT_SIZE_THRESHOLD` - byte size that triggers archival.
* :func:`view_path_for` / :func:`archive_path_for` - naming rules.
* :class:`RotationEngine` - implementation of :class:`RotationPort` bound to a
  single primary file.
* :func:`rotate` - one-shot helper used by the CLI.

System Role
-----------
Runs synchronously inside :class:`lib_log_rotate.logger.Logger`'s critical
section, so for one logger every pass sees at least the line just written.
The pass is O(primary size); the small threshold keeps that bounded.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from lib_log_rotate.application.ports.reporter import ReporterPort
from lib_log_rotate.application.ports.rotation import RotationPort, RotationResult
from lib_log_rotate.application.ports.time import ClockPort
from lib_log_rotate.domain.messages import format_archive_suffix

from ._files import open_truncated
from .clock import SystemClock
from .reporter import ConsoleReporter

LOGGER = logging.getLogger(__name__)

DEFAULT_SIZE_THRESHOLD = 1000
VIEW_PREFIX = "view_"


def view_path_for(primary_path: Path) -> Path:
    """Return the view file that mirrors ``primary_path``.

    Examples
    --------
    >>> view_path_for(Path("logs/error.log")).as_posix()
    'logs/view_error.log'
    """

    return primary_path.with_name(f"{VIEW_PREFIX}{primary_path.name}")


def archive_path_for(view_path: Path, suffix: str) -> Path:
    """Return the archive name for ``view_path`` stamped with ``suffix``.

    Examples
    --------
    >>> archive_path_for(Path("logs/view_error.log"), "2026-10-19T08-30-05.000042Z").name
    'view_error.log.2026-10-19T08-30-05.000042Z'
    """

    return view_path.with_name(f"{view_path.name}.{suffix}")


def _split_lines(content: bytes) -> list[bytes]:
    """Split ``content`` like a line scanner: ``\\n`` terminators, optional ``\\r``.

    Examples
    --------
    >>> _split_lines(b"a\\r\\nb\\nc")
    [b'a', b'b', b'c']
    >>> _split_lines(b"")
    []
    >>> _split_lines(b"x\\n\\n")
    [b'x', b'']
    """

    if not content:
        return []
    lines = content.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [line[:-1] if line.endswith(b"\r") else line for line in lines]


class RotationEngine(RotationPort):
    """Rotate the view and archive files belonging to one primary log."""

    def __init__(
        self,
        primary_path: str | os.PathLike[str],
        *,
        view_path: str | os.PathLike[str] | None = None,
        size_threshold: int = DEFAULT_SIZE_THRESHOLD,
        clock: ClockPort | None = None,
        reporter: ReporterPort | None = None,
    ) -> None:
        if size_threshold <= 0:
            raise ValueError("size_threshold must be positive")
        self._primary_path = Path(primary_path)
        self._view_path = Path(view_path) if view_path is not None else view_path_for(self._primary_path)
        self._size_threshold = size_threshold
        self._clock = clock if clock is not None else SystemClock()
        self._reporter = reporter if reporter is not None else ConsoleReporter()

    @property
    def primary_path(self) -> Path:
        return self._primary_path

    @property
    def view_path(self) -> Path:
        return self._view_path

    @property
    def size_threshold(self) -> int:
        return self._size_threshold

    def rotate(self) -> RotationResult:
        """Rewrite the view file in reverse order and archive when oversized.

        A missing primary file counts as empty: the view file is truncated and
        nothing is archived. Other read or stat failures are reported and leave
        the view file untouched.
        """
        try:
            lines, primary_size = self._read_primary()
        except OSError as exc:
            self._reporter.report("reading log file failed", path=self._primary_path, error=exc)
            return RotationResult(ok=False)

        if not self._write_view(lines):
            return RotationResult(ok=False, primary_size=primary_size)

        archive_path = None
        if primary_size > self._size_threshold:
            archive_path = self._archive()
        LOGGER.debug(
            "rotated %s: %d lines, %d bytes, archive=%s",
            self._primary_path,
            len(lines),
            primary_size,
            archive_path,
        )
        return RotationResult(ok=True, lines=len(lines), primary_size=primary_size, archive_path=archive_path)

    def _read_primary(self) -> tuple[list[bytes], int]:
        try:
            handle = self._primary_path.open("rb")
        except FileNotFoundError:
            return [], 0
        with handle:
            content = handle.read()
            size = os.fstat(handle.fileno()).st_size
        return _split_lines(content), size

    def _write_view(self, lines: list[bytes]) -> bool:
        try:
            handle = open_truncated(self._view_path)
        except OSError as exc:
            self._reporter.report("opening view file failed", path=self._view_path, error=exc)
            return False
        try:
            with handle:
                for line in reversed(lines):
                    try:
                        handle.write(line + b"\n")
                    except OSError as exc:
                        self._reporter.report("writing view file failed", path=self._view_path, error=exc)
        except OSError as exc:
            self._reporter.report("closing view file failed", path=self._view_path, error=exc)
        return True

    def _archive(self) -> Path | None:
        archive_path = archive_path_for(self._view_path, format_archive_suffix(self._clock.now()))
        try:
            self._primary_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            self._reporter.report("removing log file failed", path=self._primary_path, error=exc)
        try:
            self._view_path.replace(archive_path)
        except OSError as exc:
            self._reporter.report("archiving view file failed", path=self._view_path, error=exc)
            return None
        return archive_path


def rotate(
    primary_path: str | os.PathLike[str],
    *,
    size_threshold: int = DEFAULT_SIZE_THRESHOLD,
    reporter: ReporterPort | None = None,
) -> RotationResult:
    """Run a single rotation pass for ``primary_path``."""

    return RotationEngine(primary_path, size_threshold=size_threshold, reporter=reporter).rotate()


__all__ = [
    "DEFAULT_SIZE_THRESHOLD",
    "RotationEngine",
    "archive_path_for",
    "rotate",
    "view_path_for",
]
