"""Trace level scale deciding which log calls reach the file.

Purpose
-------
Give the logger a fixed, ordered severity scale and a single rule for whether
a call at a given severity is emitted.

Contents
--------
* :class:`TraceLevel` enum with parsing helpers and the display tag written
  into every log line.
* :func:`should_emit` gate used by :class:`lib_log_rotate.logger.Logger`.

System Role
-----------
Innermost domain module; every other layer compares severities through it so
the numeric ordering lives in one place.
"""

from __future__ import annotations

from enum import Enum


class TraceLevel(Enum):
    """Ordered trace levels understood by the file logger."""

    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def tag(self) -> str:
        """Return the tag rendered inside the second bracket of a log line.

        Examples
        --------
        >>> TraceLevel.WARNING.tag
        'Warning'
        """

        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "TraceLevel":
        """Return the :class:`TraceLevel` called ``name``, ignoring case and padding.

        Examples
        --------
        >>> TraceLevel.from_name(" warning ") is TraceLevel.WARNING
        True
        """
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown trace level: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "TraceLevel":
        """Return the :class:`TraceLevel` whose rank equals ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported trace level numeric: {level}") from exc

    @classmethod
    def coerce(cls, value: "TraceLevel | int | str") -> "TraceLevel":
        """Normalise a member, rank, or name into a :class:`TraceLevel`.

        Strings holding digits are treated as ranks so environment variables
        such as ``LOG_TRACE_LEVEL=4`` work the same as ``LOG_TRACE_LEVEL=error``.

        Examples
        --------
        >>> TraceLevel.coerce("error") is TraceLevel.ERROR
        True
        >>> TraceLevel.coerce("2") is TraceLevel.INFO
        True
        """
        if isinstance(value, TraceLevel):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unsupported trace level numeric: {value}")
        if isinstance(value, int):
            return cls.from_numeric(value)
        text = str(value).strip()
        if text.isdigit():
            return cls.from_numeric(int(text))
        return cls.from_name(text)


def should_emit(logger_level: TraceLevel, message_level: TraceLevel) -> bool:
    """Return ``True`` when a call at ``message_level`` passes ``logger_level``.

    Examples
    --------
    >>> should_emit(TraceLevel.ERROR, TraceLevel.WARNING)
    False
    >>> should_emit(TraceLevel.ERROR, TraceLevel.FATAL)
    True
    """

    return message_level.value >= logger_level.value


__all__ = ["TraceLevel", "should_emit"]
