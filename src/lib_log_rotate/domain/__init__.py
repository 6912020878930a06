"""Domain value objects for the rotating file logger."""

from __future__ import annotations

from .levels import TraceLevel, should_emit
from .messages import LogRecord, format_template, format_values

__all__ = [
    "LogRecord",
    "TraceLevel",
    "format_template",
    "format_values",
    "should_emit",
]
