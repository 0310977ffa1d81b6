"""Generate type declaration files describing an extension build."""

from .generator import TypesGenerator
from .models import DirEntry, FileEntry, ModuleEntry

__all__ = ["DirEntry", "FileEntry", "ModuleEntry", "TypesGenerator"]
