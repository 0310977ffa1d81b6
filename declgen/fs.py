"""Filesystem helpers used by the generator and writer."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .paths import normalize_path


def ensure_dir(path: Path) -> None:
    """Create ``path`` and any missing parents; no-op when it exists."""
    Path(path).mkdir(parents=True, exist_ok=True)


def write_file_if_different(path: Path, text: str) -> bool:
    """Write ``text`` to ``path`` unless the file already holds that content.

    Returns True when the file was written. Skipping identical writes keeps
    modification times stable for downstream incremental builds.
    """
    path = Path(path)
    # newline="" on both sides so the comparison sees the exact bytes on disk.
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            existing = handle.read()
    except FileNotFoundError:
        existing = None
    if existing == text:
        return False
    with path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)
    return True


def get_public_files(public_dir: Path) -> List[str]:
    """Return every file under ``public_dir`` as a sorted, forward-slash relative path."""
    root = Path(public_dir)
    if not root.is_dir():
        return []

    files: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current_dir = Path(dirpath)
        for filename in filenames:
            files.append(normalize_path((current_dir / filename).relative_to(root)))
    return sorted(files)


__all__ = ["ensure_dir", "get_public_files", "write_file_if_different"]
