"""Console reporter used as the fallback channel for swallowed failures.

Purpose
-------
Print file-open, write, close and rotation failures to standard error so
operators notice them even though log calls never raise.

Contents
--------
* :class:`ConsoleReporter` - Rich-backed implementation of
  :class:`ReporterPort`.

System Role
-----------
Default reporter wired into every :class:`lib_log_rotate.logger.Logger` and
:class:`lib_log_rotate.adapters.rotation.RotationEngine`. Each report is also
forwarded to the stdlib :mod:`logging` tree so host applications that
configure handlers can capture it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

from lib_log_rotate.application.ports.reporter import ReporterPort

LOGGER = logging.getLogger(__name__)


class ConsoleReporter(ReporterPort):
    """Write one styled line per failure to standard error.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True, width=200)
    >>> reporter = ConsoleReporter(console=console)
    >>> reporter.report("writing log failed", path=Path("logs/error.log"), error=OSError("disk full"))
    >>> "writing log failed" in console.export_text()
    True
    """

    def __init__(self, *, console: Console | None = None, style: str = "bold red") -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._style = style

    def report(self, message: str, *, path: Path | None = None, error: BaseException | None = None) -> None:
        line = self._format_line(message, path=path, error=error)
        LOGGER.warning(line)
        try:
            self._console.print(line, style=self._style, highlight=False, markup=False)
        except (OSError, ValueError):  # pragma: no cover - closed stderr
            LOGGER.debug("fallback console unavailable", exc_info=True)

    @staticmethod
    def _format_line(message: str, *, path: Path | None, error: BaseException | None) -> str:
        """Return the text printed for a single failure.

        Examples
        --------
        >>> ConsoleReporter._format_line("opening log file failed", path=Path("a.log"), error=None)
        'opening log file failed: a.log'
        >>> ConsoleReporter._format_line("closing log file failed", path=None, error=OSError("boom"))
        'closing log file failed (boom)'
        """
        text = message
        if path is not None:
            text = f"{text}: {path}"
        if error is not None:
            text = f"{text} ({error})"
        return text


__all__ = ["ConsoleReporter"]
