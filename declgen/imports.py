"""Auto-import scanning and declaration rendering."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from .config import ImportsOptions
from .logging import get_logger
from .models import Import
from .paths import normalize_path, relative_posix

SCANNED_EXTENSIONS = (".ts", ".tsx", ".mts", ".js", ".jsx", ".mjs")

_NAMED_EXPORT = re.compile(
    r"^\s*export\s+(?:declare\s+)?(?:async\s+)?"
    r"(?:function\s*\*?|const|let|var|class|enum)\s+([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
_DEFAULT_EXPORT = re.compile(r"^\s*export\s+default\b", re.MULTILINE)
_EXPORT_LIST = re.compile(r"^\s*export\s*\{([^}]*)\}\s*(from\b)?", re.MULTILINE)


class ImportScanner(Protocol):
    """Operations the types generator needs from an auto-import scanner."""

    def scan_imports_from_dir(
        self, dirs: Optional[Sequence[str]] = None, *, cwd: Path
    ) -> List[Import]:
        ...

    def get_imports(self) -> List[Import]:
        ...

    def generate_type_declarations(self, relative_to: Optional[Path] = None) -> str:
        ...


class UnimportScanner:
    """Indexes exported symbols from source directories.

    Configured imports are always known; scanned imports replace the previous
    scan on each call to :meth:`scan_imports_from_dir`.
    """

    def __init__(self, options: ImportsOptions) -> None:
        self._options = options
        self._presets = [
            Import(name=item["name"], from_=item["from"], as_=item.get("as"))
            for item in options.imports
        ]
        self._scanned: List[Import] = []
        self.logger = get_logger("imports")

    def scan_imports_from_dir(
        self, dirs: Optional[Sequence[str]] = None, *, cwd: Path
    ) -> List[Import]:
        """Scan ``dirs`` (relative to ``cwd``) for exported symbols.

        Missing sub-directories are skipped; a missing ``cwd`` or an unreadable
        file raises ``OSError``.
        """
        cwd = Path(cwd)
        if not cwd.is_dir():
            raise FileNotFoundError(f"Source directory not found: {cwd}")

        scanned: List[Import] = []
        for directory in dirs if dirs is not None else self._options.dirs:
            base = cwd / directory
            if not base.is_dir():
                self.logger.debug("Skipping missing import directory %s", base)
                continue
            for path in _iter_source_files(base):
                scanned.extend(_scan_file(path))

        self._scanned = scanned
        self.logger.debug("Indexed %d imports under %s", len(scanned), cwd)
        return list(scanned)

    def get_imports(self) -> List[Import]:
        """Return configured and scanned imports, dropping shadowed duplicates."""
        seen: Dict[str, Import] = {}
        for item in [*self._presets, *self._scanned]:
            exposed = item.as_ or item.name
            if exposed in seen:
                self.logger.warning(
                    "Duplicate auto-import '%s' from %s ignored (already provided by %s)",
                    exposed,
                    item.from_,
                    seen[exposed].from_,
                )
                continue
            seen[exposed] = item
        return list(seen.values())

    def generate_type_declarations(self, relative_to: Optional[Path] = None) -> str:
        """Render every known import as a ``declare global`` block."""
        imports = sorted(self.get_imports(), key=lambda item: item.as_ or item.name)
        lines = ["export {}", "declare global {"]
        for item in imports:
            specifier = _module_specifier(item.from_, relative_to)
            exposed = item.as_ or item.name
            lines.append(f"  const {exposed}: typeof import('{specifier}')['{item.name}']")
        lines.append("}")
        return "\n".join(lines)


def _iter_source_files(base: Path) -> List[Path]:
    def _raise(error: OSError) -> None:
        raise error

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(base, onerror=_raise):
        dirnames[:] = sorted(name for name in dirnames if name != "node_modules")
        for filename in sorted(filenames):
            if filename.endswith(".d.ts") or not filename.endswith(SCANNED_EXTENSIONS):
                continue
            files.append(Path(dirpath) / filename)
    return files


def _scan_file(path: Path) -> List[Import]:
    text = path.read_text(encoding="utf-8")
    source = normalize_path(path)
    found: List[Import] = []

    for match in _NAMED_EXPORT.finditer(text):
        found.append(Import(name=match.group(1), from_=source))

    for match in _EXPORT_LIST.finditer(text):
        if match.group(2):
            continue
        for part in match.group(1).split(","):
            part = part.strip()
            if not part or part.startswith("type "):
                continue
            if " as " in part:
                _, exported = (piece.strip() for piece in part.split(" as ", 1))
            else:
                exported = part
            if exported == "default":
                found.append(Import(name="default", from_=source, as_=_default_name(path)))
            else:
                found.append(Import(name=exported, from_=source))

    if _DEFAULT_EXPORT.search(text):
        found.append(Import(name="default", from_=source, as_=_default_name(path)))

    return found


def _default_name(path: Path) -> str:
    stem = path.name.split(".", 1)[0]
    if stem == "index":
        stem = path.parent.name
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", stem) if part]
    if not parts:
        return stem
    return parts[0][:1].lower() + parts[0][1:] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def _module_specifier(source: str, relative_to: Optional[Path]) -> str:
    if not Path(source).is_absolute():
        return source
    without_ext = re.sub(r"\.(?:tsx?|mts|jsx?|mjs)$", "", source)
    if relative_to is None:
        return without_ext
    relative = relative_posix(without_ext, relative_to)
    return relative if relative.startswith("../") else f"./{relative}"


__all__ = ["ImportScanner", "SCANNED_EXTENSIONS", "UnimportScanner"]
