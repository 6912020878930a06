"""Fallback report channel for failures inside fire-and-forget log calls.

Purpose
-------
Logging entry points never raise for I/O problems. This port is the only
place such failures become observable.

Contents
--------
* :class:`ReporterPort` - protocol with a single ``report`` method.

System Role
-----------
Implemented by :class:`lib_log_rotate.adapters.reporter.ConsoleReporter`;
tests substitute a recording fake.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ReporterPort(Protocol):
    """Surface a swallowed failure to operators."""

    def report(self, message: str, *, path: Path | None = None, error: BaseException | None = None) -> None:
        """Record ``message`` describing a failure around ``path``."""


__all__ = ["ReporterPort"]
