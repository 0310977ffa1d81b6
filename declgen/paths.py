"""Path helpers shared by the entry producers."""

from __future__ import annotations

import os
from pathlib import Path, PurePath


def normalize_path(path: str | PurePath) -> str:
    """Convert a platform path to forward-slash form."""
    return str(path).replace("\\", "/")


def relative_posix(path: str | Path, start: str | Path) -> str:
    """Return ``path`` relative to ``start`` using forward slashes.

    ``os.path.relpath`` is used instead of ``Path.relative_to`` so that paths
    outside ``start`` produce ``..`` segments.
    """
    return normalize_path(os.path.relpath(path, start))


__all__ = ["normalize_path", "relative_posix"]
