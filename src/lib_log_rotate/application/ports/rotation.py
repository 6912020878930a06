"""Rotation port describing the pass run after every log write.

Purpose
-------
Let :class:`lib_log_rotate.logger.Logger` trigger rotation without knowing how
the view and archive files are produced.

Contents
--------
* :class:`RotationResult` - outcome of one pass.
* :class:`RotationPort` - protocol with a ``rotate`` method.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class RotationResult:
    """Outcome of a single rotation pass.

    Attributes
    ----------
    ok:
        ``False`` when the pass aborted before the view file was rewritten.
    lines:
        Number of primary lines written to the view file in reverse order.
    primary_size:
        Size of the primary file in bytes when it was read; ``None`` if the
        pass aborted before the size was known.
    archive_path:
        Path of the archive created by this pass, if the threshold was crossed.
    """

    ok: bool
    lines: int = 0
    primary_size: int | None = None
    archive_path: Path | None = None

    @property
    def archived(self) -> bool:
        """Return ``True`` when this pass produced an archive file."""
        return self.archive_path is not None


@runtime_checkable
class RotationPort(Protocol):
    """Rewrite the view file for the bound primary log and archive if needed."""

    def rotate(self) -> RotationResult: ...


__all__ = ["RotationPort", "RotationResult"]
