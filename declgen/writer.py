"""Persist generated file entries to disk."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .fs import ensure_dir, write_file_if_different
from .logging import get_logger
from .models import FileEntry

logger = get_logger("writer")


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one entry."""

    path: Path
    written: bool


def write_entries(
    entries: Sequence[FileEntry], *, max_workers: Optional[int] = None
) -> List[WriteResult]:
    """Write entries with absolute paths concurrently, skipping unchanged files.

    Results keep the order of ``entries``. The first failure is re-raised
    after all submitted writes finish.
    """
    if not entries:
        return []
    for entry in entries:
        if not Path(entry.path).is_absolute():
            raise ValueError(f"Entry path must be absolute before writing: {entry.path}")

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_write_entry, entry) for entry in entries]
    return [future.result() for future in futures]


def _write_entry(entry: FileEntry) -> WriteResult:
    path = Path(entry.path)
    ensure_dir(path.parent)
    written = write_file_if_different(path, entry.text)
    logger.debug("%s %s", "Wrote" if written else "Unchanged", path)
    return WriteResult(path=path, written=written)


__all__ = ["WriteResult", "write_entries"]
