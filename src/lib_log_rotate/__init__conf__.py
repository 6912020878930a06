"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_log_rotate"
title = "Leveled file logger with reverse-order view files and size-based archives"
version = "0.1.0"
author = "lib_log_rotate contributors"
shell_command = "lib_log_rotate"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Emit the metadata banner through ``writer`` one line at a time.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_rotate:\\n'
    """

    write = writer if writer is not None else sys.stdout.write
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    write(f"Info for {name}:\n")
    write("\n")
    for label, value in fields:
        write(f"    {label:<{pad}} = {value}\n")


def summary_info() -> str:
    """Return the banner printed by :func:`print_info` as one string."""

    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)
