"""Producers for each generated file in the types directory.

Every producer returns a single :class:`FileEntry` whose path is relative to
``BuildSettings.output_dir``. The ``render_*`` helpers are pure string builders
so the formatting can be tested without touching the filesystem.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .config import BuildSettings, EslintGlobalsPropValue, ImportsOptions
from .entrypoints import get_entrypoint_bundle_path, is_html_entrypoint
from .fs import get_public_files
from .globals import get_entrypoint_globals, get_globals
from .i18n import parse_i18n_messages
from .imports import ImportScanner
from .models import DirEntry, Entrypoint, FileEntry, GlobalVar, Message, ModuleEntry
from .paths import normalize_path, relative_posix

IMPORTS_DECLARATION_PATH = "types/imports.d.ts"
PATHS_DECLARATION_PATH = "types/paths.d.ts"
I18N_DECLARATION_PATH = "types/i18n.d.ts"
GLOBALS_DECLARATION_PATH = "types/globals.d.ts"
TSCONFIG_PATH = "tsconfig.json"
MAIN_DECLARATION_PATH = "wxt.d.ts"

GENERATED_HEADER = "// Generated by wxt"
NO_DESCRIPTION = "No message description."


@lru_cache(maxsize=1)
def _template_env() -> Environment:
    loader = FileSystemLoader(str(Path(__file__).with_name("templates")))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def _render(template_name: str, **context: object) -> str:
    return _template_env().get_template(template_name).render(**context)


# Auto-imports


def get_imports_declaration_entry(scanner: ImportScanner, settings: BuildSettings) -> FileEntry:
    """Index the source directory and declare every auto-import globally."""
    scanner.scan_imports_from_dir(cwd=settings.src_dir)
    declarations = scanner.generate_type_declarations(relative_to=settings.types_dir)
    return FileEntry(
        path=IMPORTS_DECLARATION_PATH,
        text=_render("imports.d.ts.j2", declarations=declarations),
        ts_reference=True,
    )


def get_imports_eslint_entry(scanner: ImportScanner, options: ImportsOptions) -> FileEntry:
    """Build the ESLint ``globals`` file from the already-scanned imports."""
    names = sorted(name for name in (item.as_ or item.name for item in scanner.get_imports()) if name)
    return FileEntry(
        path=options.eslintrc.file_path,
        text=render_eslint_globals(names, options.eslintrc.globals_prop_value),
    )


def render_eslint_globals(names: Iterable[str], value: EslintGlobalsPropValue) -> str:
    globals_map: Dict[str, EslintGlobalsPropValue] = {name: value for name in names}
    return json.dumps({"globals": globals_map}, indent=2) + "\n"


# browser.runtime.getURL


def get_paths_declaration_entry(
    entrypoints: Sequence[Entrypoint], settings: BuildSettings
) -> FileEntry:
    """Declare the ``PublicPath`` union from bundle outputs and public files."""
    paths = [
        get_entrypoint_bundle_path(
            entry,
            settings.out_dir,
            ".html" if is_html_entrypoint(entry) else ".js",
        )
        for entry in entrypoints
    ]
    paths.extend(get_public_files(settings.public_dir))
    return FileEntry(
        path=PATHS_DECLARATION_PATH,
        text=render_paths_declaration(paths),
        ts_reference=True,
    )


def render_paths_declaration(paths: Iterable[str]) -> str:
    """Render the paths declaration; an empty union becomes ``never``."""
    rows = sorted({f'    | "/{normalize_path(path)}"' for path in paths})
    union = "\n".join(rows) or "    | never"
    return _render("paths.d.ts.j2", union=union)


# browser.i18n.getMessage


def get_i18n_declaration_entry(settings: BuildSettings) -> FileEntry:
    """Declare a ``getMessage`` overload per message of the default locale.

    Without a configured default locale an empty bundle is used, so the file
    still renders with no overloads.
    """
    default_locale = settings.manifest.default_locale
    if default_locale:
        bundle_path = settings.public_dir / "_locales" / default_locale / "messages.json"
        content = json.loads(bundle_path.read_text(encoding="utf-8"))
        messages = parse_i18n_messages(content)
    else:
        messages = parse_i18n_messages({})

    return FileEntry(
        path=I18N_DECLARATION_PATH,
        text=render_i18n_declaration(messages),
        ts_reference=True,
    )


def render_i18n_declaration(messages: Sequence[Message]) -> str:
    return _render("i18n.d.ts.j2", messages=messages, no_description=NO_DESCRIPTION)


# import.meta.env.*


def get_globals_declaration_entry(settings: BuildSettings) -> FileEntry:
    # Build-wide declaration, so the entrypoint name is left blank.
    globals_list = [*get_globals(settings), *get_entrypoint_globals("")]
    return FileEntry(
        path=GLOBALS_DECLARATION_PATH,
        text=render_globals_declaration(globals_list),
        ts_reference=True,
    )


def render_globals_declaration(globals_list: Sequence[GlobalVar]) -> str:
    return _render("globals.d.ts.j2", globals=globals_list)


# tsconfig.json


def get_tsconfig_entry(settings: BuildSettings) -> FileEntry:
    """Build a strict tsconfig with path mappings for every alias."""
    output_dir = settings.output_dir

    paths: Dict[str, List[str]] = {}
    for alias, target in settings.alias.items():
        alias_path = relative_posix(target, output_dir)
        paths[alias] = [alias_path]
        paths[f"{alias}/*"] = [f"{alias_path}/*"]

    config = {
        "compilerOptions": {
            "target": "ESNext",
            "module": "ESNext",
            "moduleResolution": "Bundler",
            "noEmit": True,
            "esModuleInterop": True,
            "forceConsistentCasingInFileNames": True,
            "resolveJsonModule": True,
            "strict": True,
            "skipLibCheck": True,
            "paths": paths,
        },
        "include": [
            f"{relative_posix(settings.root, output_dir)}/**/*",
            f"./{MAIN_DECLARATION_PATH}",
        ],
        "exclude": [relative_posix(settings.out_base_dir, output_dir)],
    }
    return FileEntry(path=TSCONFIG_PATH, text=json.dumps(config, indent=2) + "\n")


# Cross-reference file


def get_main_declaration_entry(
    entries: Sequence[DirEntry], settings: BuildSettings
) -> FileEntry:
    """Reference every module entry and every file entry marked ``ts_reference``."""
    lines = [GENERATED_HEADER]
    for entry in entries:
        if isinstance(entry, ModuleEntry):
            lines.append(f'/// <reference types="{entry.module}" />')
            continue
        if not entry.ts_reference:
            continue
        absolute_path = settings.output_dir / entry.path
        relative_path = relative_posix(absolute_path, settings.output_dir)
        lines.append(f'/// <reference types="./{relative_path}" />')
    return FileEntry(path=MAIN_DECLARATION_PATH, text="\n".join(lines))


__all__ = [
    "GLOBALS_DECLARATION_PATH",
    "I18N_DECLARATION_PATH",
    "IMPORTS_DECLARATION_PATH",
    "MAIN_DECLARATION_PATH",
    "PATHS_DECLARATION_PATH",
    "TSCONFIG_PATH",
    "get_globals_declaration_entry",
    "get_i18n_declaration_entry",
    "get_imports_declaration_entry",
    "get_imports_eslint_entry",
    "get_main_declaration_entry",
    "get_paths_declaration_entry",
    "get_tsconfig_entry",
    "render_eslint_globals",
    "render_globals_declaration",
    "render_i18n_declaration",
    "render_paths_declaration",
]
