"""Public package surface of the rotating file logger.

``Logger`` writes leveled records to one file and, after every write, rewrites
the ``view_`` file in most-recent-first order and archives it once the primary
file passes the size threshold. ``rotate`` runs such a pass on demand.
"""

from __future__ import annotations

import logging

from .adapters.reporter import ConsoleReporter
from .adapters.rotation import DEFAULT_SIZE_THRESHOLD, RotationEngine, rotate, view_path_for
from .application.ports import ClockPort, ReporterPort, RotationPort, RotationResult
from .domain.levels import TraceLevel, should_emit
from .domain.messages import LogRecord
from .logger import DEFAULT_FILE_PATH, DEFAULT_TRACE_LEVEL, Logger, default_logger, new_logger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ClockPort",
    "ConsoleReporter",
    "DEFAULT_FILE_PATH",
    "DEFAULT_SIZE_THRESHOLD",
    "DEFAULT_TRACE_LEVEL",
    "LogRecord",
    "Logger",
    "ReporterPort",
    "RotationEngine",
    "RotationPort",
    "RotationResult",
    "TraceLevel",
    "default_logger",
    "new_logger",
    "rotate",
    "should_emit",
    "view_path_for",
]
