"""Adapters implementing the application ports against the filesystem."""

from __future__ import annotations

from .clock import SystemClock
from .reporter import ConsoleReporter
from .rotation import DEFAULT_SIZE_THRESHOLD, RotationEngine, rotate, view_path_for

__all__ = [
    "ConsoleReporter",
    "DEFAULT_SIZE_THRESHOLD",
    "RotationEngine",
    "SystemClock",
    "rotate",
    "view_path_for",
]
