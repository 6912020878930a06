"""Protocols the logger depends on instead of concrete adapters."""

from __future__ import annotations

from .reporter import ReporterPort
from .rotation import RotationPort, RotationResult
from .time import ClockPort

__all__ = ["ClockPort", "ReporterPort", "RotationPort", "RotationResult"]
