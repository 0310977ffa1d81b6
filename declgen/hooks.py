"""Extension hooks that contribute extra entries to the types directory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from importlib import import_module, metadata
from typing import Callable, Iterable, List, Sequence

from .config import BuildSettings
from .models import DirEntry, FileEntry, ModuleEntry

_ENTRY_POINT_GROUP = "declgen.hooks"


class HookError(RuntimeError):
    """Raised when a hook cannot be loaded or returns invalid entries."""


class TypesHook(ABC):
    """Contract for plugins adding files or module references to the output."""

    name: str = "hook"

    @abstractmethod
    def prepare_types(
        self, settings: BuildSettings, entries: Sequence[DirEntry]
    ) -> Iterable[DirEntry]:
        """Return additional entries given the entries collected so far."""


class _CallableHook(TypesHook):
    def __init__(
        self,
        name: str,
        func: Callable[[BuildSettings, Sequence[DirEntry]], Iterable[DirEntry] | None],
    ) -> None:
        self.name = name
        self._func = func

    def prepare_types(
        self, settings: BuildSettings, entries: Sequence[DirEntry]
    ) -> Iterable[DirEntry]:
        return self._func(settings, entries) or ()


def run_hooks(
    hooks: Iterable[TypesHook], settings: BuildSettings, entries: Sequence[DirEntry]
) -> tuple[DirEntry, ...]:
    """Run each hook in order; later hooks see entries added by earlier ones."""
    collected = tuple(entries)
    for hook in hooks:
        try:
            added = tuple(hook.prepare_types(settings, collected))
        except TypeError as exc:
            raise HookError(f"Hook '{hook.name}' must return an iterable of entries") from exc
        for entry in added:
            if not isinstance(entry, (FileEntry, ModuleEntry)):
                raise HookError(
                    f"Hook '{hook.name}' returned {type(entry).__name__}, expected FileEntry or ModuleEntry"
                )
        collected = collected + added
    return collected[len(entries):]


def discover_hooks(names: Sequence[str] = ()) -> List[TypesHook]:
    """Return hooks listed by import path followed by installed entry points."""
    hooks: List[TypesHook] = []
    for target in names:
        hooks.append(coerce_hook(target, _load_object(target)))

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:
            raise HookError(f"Failed to load hook entry point '{entry.name}': {exc}") from exc
        hooks.append(coerce_hook(entry.name, loaded))
    return hooks


def coerce_hook(name: str, obj: object) -> TypesHook:
    """Turn a hook instance, hook class, or plain callable into a ``TypesHook``."""
    if isinstance(obj, TypesHook):
        return obj
    if isinstance(obj, type) and issubclass(obj, TypesHook):
        return obj()
    if callable(obj):
        return _CallableHook(name, obj)  # type: ignore[arg-type]
    raise HookError(f"Hook '{name}' must be a TypesHook subclass, instance, or callable")


def _load_object(target: str) -> object:
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise HookError(f"Hook '{target}' must use the 'module:attribute' form")
    try:
        module = import_module(module_name)
    except ImportError as exc:
        raise HookError(f"Failed to import hook module '{module_name}': {exc}") from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise HookError(f"Hook module '{module_name}' has no attribute '{attr}'") from exc


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = ["HookError", "TypesHook", "coerce_hook", "discover_hooks", "run_hooks"]
