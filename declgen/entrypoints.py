"""Entrypoint discovery and bundle path helpers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .config import BuildSettings
from .models import Entrypoint
from .paths import relative_posix

ENTRYPOINT_EXTENSIONS = (".html", ".ts", ".tsx", ".js", ".jsx")

_NAMED_TYPES = {
    "popup": "popup",
    "options": "options",
    "background": "background",
    "sandbox": "sandbox",
    "newtab": "newtab",
    "devtools": "devtools",
    "sidepanel": "sidepanel",
}


def is_html_entrypoint(entrypoint: Entrypoint) -> bool:
    """Return True when the entrypoint is an HTML page."""
    return entrypoint.input_path.suffix.lower() == ".html"


def get_entrypoint_bundle_path(entrypoint: Entrypoint, out_dir: Path, ext: str) -> str:
    """Return the bundle output path of ``entrypoint`` relative to ``out_dir``."""
    return relative_posix(entrypoint.output_dir / f"{entrypoint.name}{ext}", out_dir)


def find_entrypoints(settings: BuildSettings) -> List[Entrypoint]:
    """Discover entrypoints under ``settings.entrypoints_dir``, sorted by name.

    Files directly inside the directory are entrypoints named after their stem;
    sub-directories count when they contain an ``index`` file.
    """
    root = settings.entrypoints_dir
    if not root.is_dir():
        return []

    entrypoints: List[Entrypoint] = []
    for child in sorted(root.iterdir()):
        if child.is_dir():
            input_path = _find_index(child)
            if input_path is None:
                continue
            name = child.name
        elif child.suffix.lower() in ENTRYPOINT_EXTENSIONS:
            input_path = child
            name = child.name[: -len(child.suffix)]
        else:
            continue
        entrypoints.append(_build_entrypoint(name, input_path, settings.out_dir))

    return sorted(entrypoints, key=lambda entry: entry.name)


def _find_index(directory: Path) -> Optional[Path]:
    for ext in ENTRYPOINT_EXTENSIONS:
        candidate = directory / f"index{ext}"
        if candidate.is_file():
            return candidate
    return None


def _build_entrypoint(name: str, input_path: Path, out_dir: Path) -> Entrypoint:
    entry_type = _detect_type(name, input_path)
    output_dir = out_dir
    if entry_type == "content-script":
        output_dir = out_dir / "content-scripts"
        if name.endswith(".content"):
            name = name[: -len(".content")]
    return Entrypoint(name=name, input_path=input_path, output_dir=output_dir, type=entry_type)


def _detect_type(name: str, input_path: Path) -> str:
    if name == "content" or name.endswith(".content"):
        return "content-script"
    if name in _NAMED_TYPES:
        return _NAMED_TYPES[name]
    if input_path.suffix.lower() == ".html":
        return "unlisted-page"
    return "unlisted-script"


__all__ = [
    "ENTRYPOINT_EXTENSIONS",
    "find_entrypoints",
    "get_entrypoint_bundle_path",
    "is_html_entrypoint",
]
