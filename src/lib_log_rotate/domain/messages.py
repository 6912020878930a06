"""Message formatting and the single-line log record.

Purpose
-------
Turn arbitrary caller values into the one physical line appended to the
primary log file.

Contents
--------
* :func:`format_values` - positional mode, ``str()`` of each value joined by
  ``", "``.
* :func:`format_template` - printf-style template mode.
* :func:`normalise_newlines` - collapse embedded newlines into spaces.
* :func:`format_rfc3339` / :func:`format_archive_suffix` - timestamp renderers.
* :class:`LogRecord` - immutable record with :meth:`LogRecord.render`.

System Role
-----------
Pure domain code without I/O; the logger calls into it while holding its lock
and the rotation engine reuses the timestamp helpers for archive names.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .levels import TraceLevel

_SEPARATOR = ", "


def format_values(values: Sequence[Any]) -> str:
    """Render ``values`` with their default string form, comma separated.

    Examples
    --------
    >>> format_values(["disk", 3, None])
    'disk, 3, None'
    >>> format_values([])
    ''
    """

    return _SEPARATOR.join(str(value) for value in values)


def format_template(template: str, values: Sequence[Any]) -> str:
    """Substitute ``values`` into ``template`` using printf-style directives.

    A single mapping argument feeds ``%(name)s`` directives, mirroring the
    stdlib :mod:`logging` convention. A template without values still has its
    ``%%`` escapes collapsed; any other ``%`` it holds is kept verbatim. Mismatched directives never
    raise; the template is kept and the values are appended after a
    ``%!(BADFORMAT ...)`` marker.

    Examples
    --------
    >>> format_template("%s=%04d", ["retries", 7])
    'retries=0007'
    >>> format_template("%(user)s logged in", [{"user": "ada"}])
    'ada logged in'
    >>> format_template("100%", [])
    '100%'
    >>> format_template("100%% done", [])
    '100% done'
    >>> format_template("%d", ["x"])
    '%d %!(BADFORMAT x)'
    """

    if not values:
        try:
            return template % ()
        except (TypeError, ValueError):
            return template
    arguments: Any
    if len(values) == 1 and isinstance(values[0], Mapping):
        arguments = values[0]
    else:
        arguments = tuple(values)
    try:
        return template % arguments
    except (TypeError, ValueError, KeyError):
        return f"{template} %!(BADFORMAT {format_values(values)})"


def normalise_newlines(message: str) -> str:
    """Replace every ``\\n`` with a single space.

    Examples
    --------
    >>> normalise_newlines("line1\\nline2")
    'line1 line2'
    """

    return message.replace("\n", " ")


def format_rfc3339(timestamp: datetime) -> str:
    """Render ``timestamp`` as RFC3339 with second precision.

    UTC offsets are written as ``Z``; naive datetimes are interpreted in the
    local timezone.

    Examples
    --------
    >>> from datetime import timezone, timedelta
    >>> format_rfc3339(datetime(2026, 10, 19, 8, 30, 5, 999, tzinfo=timezone.utc))
    '2026-10-19T08:30:05Z'
    >>> format_rfc3339(datetime(2026, 10, 19, 8, 30, 5, tzinfo=timezone(timedelta(hours=2))))
    '2026-10-19T08:30:05+02:00'
    """

    aware = timestamp if timestamp.tzinfo is not None else timestamp.astimezone()
    rendered = aware.isoformat(timespec="seconds")
    if rendered.endswith("+00:00"):
        rendered = rendered[: -len("+00:00")] + "Z"
    return rendered


def format_archive_suffix(timestamp: datetime) -> str:
    """Render the filename-safe timestamp appended to archived view files.

    Examples
    --------
    >>> from datetime import timezone
    >>> format_archive_suffix(datetime(2026, 10, 19, 8, 30, 5, 42, tzinfo=timezone.utc))
    '2026-10-19T08-30-05.000042Z'
    """

    aware = timestamp if timestamp.tzinfo is not None else timestamp.astimezone()
    rendered = aware.isoformat(timespec="microseconds")
    if rendered.endswith("+00:00"):
        rendered = rendered[: -len("+00:00")] + "Z"
    return rendered.replace(":", "-")


@dataclass(slots=True, frozen=True)
class LogRecord:
    """One log line before it is serialised.

    Attributes
    ----------
    timestamp:
        Capture time of the call, taken while the logger holds its lock.
    level:
        Severity whose :attr:`TraceLevel.tag` fills the second bracket.
    message:
        Rendered body; newlines are collapsed in :meth:`render`.
    """

    timestamp: datetime
    level: TraceLevel
    message: str

    def render(self) -> str:
        """Return ``[<timestamp>][<tag>][<message>]`` plus a trailing newline.

        Examples
        --------
        >>> from datetime import timezone
        >>> record = LogRecord(datetime(2026, 10, 19, tzinfo=timezone.utc), TraceLevel.ERROR, "a\\nb")
        >>> record.render()
        '[2026-10-19T00:00:00Z][Error][a b]\\n'
        """

        body = normalise_newlines(self.message)
        return f"[{format_rfc3339(self.timestamp)}][{self.level.tag}][{body}]\n"


__all__ = [
    "LogRecord",
    "format_archive_suffix",
    "format_rfc3339",
    "format_template",
    "format_values",
    "normalise_newlines",
]
