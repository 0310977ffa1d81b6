"""Core data models shared across declgen components."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class ModuleEntry:
    """Reference to an external type module; carries no file content."""

    module: str


@dataclass(frozen=True)
class FileEntry:
    """Generated file, with a path relative to the output directory until written."""

    path: str
    text: str
    ts_reference: bool = False


DirEntry = Union[ModuleEntry, FileEntry]


@dataclass(frozen=True)
class Message:
    """Localized message key and its default-locale text."""

    name: str
    message: str
    description: Optional[str] = None


@dataclass(frozen=True)
class GlobalVar:
    """Build-time constant exposed through ``import.meta.env``."""

    name: str
    value: object
    type: str


@dataclass(frozen=True)
class Import:
    """Symbol that can be used without an explicit import statement."""

    name: str
    from_: str
    as_: Optional[str] = None


@dataclass(frozen=True)
class Entrypoint:
    """Extension entrypoint and where its bundle is written."""

    name: str
    input_path: Path
    output_dir: Path
    type: str
