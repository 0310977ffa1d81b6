"""Pipeline that assembles and writes the generated types directory."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import BuildSettings, ImportsOptions
from .entries import (
    get_globals_declaration_entry,
    get_i18n_declaration_entry,
    get_imports_declaration_entry,
    get_imports_eslint_entry,
    get_main_declaration_entry,
    get_paths_declaration_entry,
    get_tsconfig_entry,
)
from .fs import ensure_dir
from .hooks import TypesHook, discover_hooks, run_hooks
from .imports import ImportScanner, UnimportScanner
from .logging import get_logger
from .models import DirEntry, Entrypoint, FileEntry, ModuleEntry
from .writer import WriteResult, write_entries

BUILDER_ENV_MODULE = "wxt/vite-builder-env"

ScannerFactory = Callable[[ImportsOptions], ImportScanner]


@dataclass(frozen=True)
class GenerateResult:
    """Entries produced by a run and what happened when writing them."""

    entries: Tuple[DirEntry, ...]
    writes: Tuple[WriteResult, ...]

    @property
    def written(self) -> List[WriteResult]:
        return [result for result in self.writes if result.written]


class TypesGenerator:
    """Produces every declaration entry for a build and writes them to disk."""

    def __init__(
        self,
        settings: BuildSettings,
        *,
        hooks: Optional[Iterable[TypesHook]] = None,
        scanner_factory: Optional[ScannerFactory] = None,
    ) -> None:
        self.settings = settings
        self._hooks = list(hooks) if hooks is not None else None
        self._scanner_factory: ScannerFactory = scanner_factory or UnimportScanner
        self.logger = get_logger("generator")

    def generate(self, entrypoints: Sequence[Entrypoint]) -> GenerateResult:
        """Generate and write all files inside ``settings.output_dir``."""
        settings = self.settings
        self.logger.info("Generating types in %s", settings.output_dir)
        ensure_dir(settings.types_dir)

        entries: Tuple[DirEntry, ...] = ()
        stages: List[Callable[[Tuple[DirEntry, ...]], Sequence[DirEntry]]] = [
            lambda _: self._module_entries(),
            lambda _: self._imports_entries(),
            lambda _: [get_paths_declaration_entry(entrypoints, settings)],
            lambda _: self._i18n_entries(),
            lambda _: [get_globals_declaration_entry(settings)],
            lambda _: [get_tsconfig_entry(settings)],
            self._hook_entries,
            lambda collected: [get_main_declaration_entry(collected, settings)],
        ]
        for stage in stages:
            entries = entries + tuple(stage(entries))

        for entry in entries:
            self.logger.debug("Entry %s", entry.module if isinstance(entry, ModuleEntry) else entry.path)

        files = [
            replace(entry, path=str(settings.output_dir / entry.path))
            for entry in entries
            if isinstance(entry, FileEntry)
        ]
        writes = write_entries(files)
        self.logger.info(
            "Types ready: %d written, %d unchanged",
            sum(1 for result in writes if result.written),
            sum(1 for result in writes if not result.written),
        )
        return GenerateResult(entries=entries, writes=tuple(writes))

    def _module_entries(self) -> List[DirEntry]:
        # Local modules are already part of the project's type graph.
        entries: List[DirEntry] = [ModuleEntry(module=BUILDER_ENV_MODULE)]
        for module in self.settings.modules:
            if module.type == "node_module" and module.config_key is not None:
                entries.append(ModuleEntry(module=module.id))
        return entries

    def _imports_entries(self) -> List[DirEntry]:
        options = self.settings.imports
        if options is None:
            self.logger.debug("Auto-imports disabled")
            return []
        scanner = self._scanner_factory(options)
        entries: List[DirEntry] = [get_imports_declaration_entry(scanner, self.settings)]
        if options.eslintrc.enabled:
            entries.append(get_imports_eslint_entry(scanner, options))
        return entries

    def _i18n_entries(self) -> List[DirEntry]:
        if not (self.settings.public_dir / "_locales").exists():
            return []
        return [get_i18n_declaration_entry(self.settings)]

    def _hook_entries(self, collected: Tuple[DirEntry, ...]) -> Sequence[DirEntry]:
        hooks = self._hooks
        if hooks is None:
            hooks = discover_hooks(self.settings.hooks)
        added = run_hooks(hooks, self.settings, collected)
        if added:
            self.logger.debug("Hooks added %d entries", len(added))
        return added


__all__ = ["BUILDER_ENV_MODULE", "GenerateResult", "TypesGenerator"]
