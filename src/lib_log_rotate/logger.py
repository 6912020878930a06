"""Leveled file logger with synchronous rotation.

Purpose
-------
Expose the ten logging entry points (five severities, each in positional and
template form) and own the critical section in which a record is appended to
the primary file and the view file is rotated.

Contents
--------
* :data:`DEFAULT_FILE_PATH` / :data:`DEFAULT_TRACE_LEVEL` - defaults used by
  :func:`default_logger`.
* :class:`Logger` - per-file writer with its own lock and rotation engine.
* :func:`new_logger` / :func:`default_logger` - construction helpers.

System Role
-----------
Composition point of the package: joins the domain formatter with the file
adapters. Suppressed calls return before formatting, locking or I/O. Every
failure is reported through the fallback channel and swallowed; only the
``fatal`` calls end the process.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Any, Callable, NoReturn

from .adapters._files import open_append
from .adapters.clock import SystemClock
from .adapters.reporter import ConsoleReporter
from .adapters.rotation import DEFAULT_SIZE_THRESHOLD, RotationEngine
from .application.ports import ClockPort, ReporterPort, RotationPort
from .domain.levels import TraceLevel, should_emit
from .domain.messages import LogRecord, format_template, format_values

LOGGER = logging.getLogger(__name__)

DEFAULT_FILE_PATH = Path("./logs/error.log")
DEFAULT_TRACE_LEVEL = TraceLevel.DEBUG
FATAL_EXIT_CODE = 1

ExitHook = Callable[[int], Any]


def exit_process(code: int) -> None:
    """End the whole process with ``code`` from whichever thread calls it.

    The main thread raises :class:`SystemExit` through :func:`sys.exit` so
    ``finally`` blocks and atexit handlers run. Other threads cannot stop the
    interpreter that way, so stdio is flushed and :func:`os._exit` is used.
    """
    if threading.current_thread() is threading.main_thread():
        sys.exit(code)
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            try:
                stream.flush()
            except (OSError, ValueError):
                pass
    os._exit(code)


class Logger:
    """Append leveled records to one file and rotate it after each write.

    Parameters
    ----------
    file_path:
        Primary log file. Its parent directory must exist; a missing directory
        is reported as an open failure.
    trace_level:
        Minimum severity written. Accepts a :class:`TraceLevel`, its rank, or
        its name.
    clock:
        Source of record and archive timestamps.
    reporter:
        Fallback channel for swallowed failures.
    rotation:
        Rotation engine run after every write; defaults to a
        :class:`RotationEngine` bound to ``file_path``.
    size_threshold:
        Byte size past which the default rotation engine archives.
    exit_hook:
        Called with ``1`` after ``fatal``/``fatalf``; :func:`exit_process` by
        default, which ends the process from any thread.

    Examples
    --------
    >>> import tempfile
    >>> with tempfile.TemporaryDirectory() as tmp:
    ...     log = Logger(Path(tmp) / "app.log", TraceLevel.WARNING)
    ...     log.info("skipped")
    ...     log.errorf("disk %s at %d%%", "/var", 97)
    ...     print((Path(tmp) / "app.log").read_text().split("][", 1)[1])
    Error][disk /var at 97%]
    <BLANKLINE>
    """

    def __init__(
        self,
        file_path: str | os.PathLike[str],
        trace_level: TraceLevel | int | str = DEFAULT_TRACE_LEVEL,
        *,
        clock: ClockPort | None = None,
        reporter: ReporterPort | None = None,
        rotation: RotationPort | None = None,
        size_threshold: int = DEFAULT_SIZE_THRESHOLD,
        exit_hook: ExitHook = exit_process,
    ) -> None:
        self._file_path = Path(file_path)
        self._trace_level = TraceLevel.coerce(trace_level)
        self._clock = clock if clock is not None else SystemClock()
        self._reporter = reporter if reporter is not None else ConsoleReporter()
        if rotation is None:
            rotation = RotationEngine(
                self._file_path,
                size_threshold=size_threshold,
                clock=self._clock,
                reporter=self._reporter,
            )
        self._rotation = rotation
        self._exit_hook = exit_hook
        self._lock = threading.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def trace_level(self) -> TraceLevel:
        return self._trace_level

    @property
    def rotation(self) -> RotationPort:
        return self._rotation

    def __repr__(self) -> str:
        return f"Logger(file_path={str(self._file_path)!r}, trace_level=TraceLevel.{self._trace_level.name})"

    def debug(self, *values: Any) -> None:
        """Write ``values`` at ``Debug``; see :meth:`_log`."""
        self._log_values(TraceLevel.DEBUG, values)

    def debugf(self, template: str, *values: Any) -> None:
        """Write a printf-style ``template`` at ``Debug``; see :meth:`_log`."""
        self._log_template(TraceLevel.DEBUG, template, values)

    def info(self, *values: Any) -> None:
        """Write ``values`` at ``Info``; see :meth:`_log`."""
        self._log_values(TraceLevel.INFO, values)

    def infof(self, template: str, *values: Any) -> None:
        """Write a printf-style ``template`` at ``Info``; see :meth:`_log`."""
        self._log_template(TraceLevel.INFO, template, values)

    def warning(self, *values: Any) -> None:
        """Write ``values`` at ``Warning``; see :meth:`_log`."""
        self._log_values(TraceLevel.WARNING, values)

    def warningf(self, template: str, *values: Any) -> None:
        """Write a printf-style ``template`` at ``Warning``; see :meth:`_log`."""
        self._log_template(TraceLevel.WARNING, template, values)

    def error(self, *values: Any) -> None:
        """Write ``values`` at ``Error``; see :meth:`_log`."""
        self._log_values(TraceLevel.ERROR, values)

    def errorf(self, template: str, *values: Any) -> None:
        """Write a printf-style ``template`` at ``Error``; see :meth:`_log`."""
        self._log_template(TraceLevel.ERROR, template, values)

    def fatal(self, *values: Any) -> NoReturn:
        """Write ``values`` at ``Fatal`` and exit with status 1."""
        self._log_values(TraceLevel.FATAL, values)
        self._exit_hook(FATAL_EXIT_CODE)
        raise SystemExit(FATAL_EXIT_CODE)

    def fatalf(self, template: str, *values: Any) -> NoReturn:
        """Write a printf-style ``template`` at ``Fatal`` and exit with status 1."""
        self._log_template(TraceLevel.FATAL, template, values)
        self._exit_hook(FATAL_EXIT_CODE)
        raise SystemExit(FATAL_EXIT_CODE)

    def _log_values(self, level: TraceLevel, values: tuple[Any, ...]) -> None:
        if not should_emit(self._trace_level, level):
            return
        self._log(level, lambda: format_values(values))

    def _log_template(self, level: TraceLevel, template: str, values: tuple[Any, ...]) -> None:
        if not should_emit(self._trace_level, level):
            return
        self._log(level, lambda: format_template(template, values))

    def _log(self, level: TraceLevel, render: Callable[[], str]) -> None:
        """Append one record and rotate, holding the lock throughout.

        Parameters
        ----------
        level:
            Severity already accepted by :func:`should_emit`.
        render:
            Deferred message renderer, evaluated inside the critical section.

        Notes
        -----
        An open failure aborts the write without a rotation pass. Write and
        close failures are reported and the rotation pass still runs.
        """
        with self._lock:
            record = LogRecord(timestamp=self._clock.now(), level=level, message=render())
            payload = record.render().encode("utf-8")
            try:
                stream = open_append(self._file_path)
            except OSError as exc:
                self._reporter.report("opening log file failed", path=self._file_path, error=exc)
                return
            try:
                try:
                    stream.write(payload)
                except OSError as exc:
                    self._reporter.report("writing log failed", path=self._file_path, error=exc)
            finally:
                try:
                    stream.close()
                except OSError as exc:
                    self._reporter.report("closing log file failed", path=self._file_path, error=exc)
                self._rotation.rotate()


def new_logger(file_path: str | os.PathLike[str], trace_level: TraceLevel | int | str) -> Logger:
    """Return a :class:`Logger` writing to ``file_path`` at ``trace_level``."""

    return Logger(file_path, trace_level)


def default_logger() -> Logger:
    """Return a fresh logger on ``./logs/error.log`` that writes every level."""

    return Logger(DEFAULT_FILE_PATH, DEFAULT_TRACE_LEVEL)


__all__ = [
    "DEFAULT_FILE_PATH",
    "DEFAULT_TRACE_LEVEL",
    "FATAL_EXIT_CODE",
    "Logger",
    "default_logger",
    "exit_process",
    "new_logger",
]
