"""Helper utilities for constructing temporary extension projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Mapping

import yaml

from declgen.config import BuildSettings, load_config


class ProjectBuilder:
    """Utility for writing files into a throwaway project and loading its settings."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_messages(self, locale: str, messages: Mapping[str, Any], public_dir: str = "public") -> Path:
        """Write a `_locales/<locale>/messages.json` bundle."""
        path = self.root / public_dir / "_locales" / locale / "messages.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(messages), encoding="utf-8")
        return path

    def configure(self, data: Mapping[str, Any]) -> None:
        """Write `.declgen.yml` from a mapping."""
        (self.root / ".declgen.yml").write_text(yaml.safe_dump(dict(data)), encoding="utf-8")

    def settings(self) -> BuildSettings:
        """Return freshly loaded settings for the project."""
        return load_config(self.root)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["ProjectBuilder"]
