"""Tests for declgen.generator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from declgen.entrypoints import find_entrypoints
from declgen.generator import BUILDER_ENV_MODULE, TypesGenerator
from declgen.hooks import coerce_hook
from declgen.models import FileEntry, ModuleEntry


def _references(output_dir: Path) -> list[str]:
    lines = (output_dir / "wxt.d.ts").read_text(encoding="utf-8").splitlines()
    return [line for line in lines if line.startswith("/// <reference")]


def _seed_extension(project) -> None:
    project.write(
        {
            "entrypoints/popup.html": "<html></html>",
            "entrypoints/background.ts": "export default defineBackground(() => {})",
            "public/icon.png": "png",
        }
    )


def test_generate_end_to_end_without_imports_or_locales(project) -> None:
    _seed_extension(project)
    project.configure({"imports": False})
    settings = project.settings()

    result = TypesGenerator(settings, hooks=[]).generate(find_entrypoints(settings))

    shapes = [entry.module if isinstance(entry, ModuleEntry) else entry.path for entry in result.entries]
    assert shapes == [
        BUILDER_ENV_MODULE,
        "types/paths.d.ts",
        "types/globals.d.ts",
        "tsconfig.json",
        "wxt.d.ts",
    ]

    paths_text = (settings.output_dir / "types" / "paths.d.ts").read_text(encoding="utf-8")
    assert '    | "/background.js"\n    | "/icon.png"\n    | "/popup.html"\n' in paths_text

    assert _references(settings.output_dir) == [
        '/// <reference types="wxt/vite-builder-env" />',
        '/// <reference types="./types/paths.d.ts" />',
        '/// <reference types="./types/globals.d.ts" />',
    ]
    assert not (settings.output_dir / "types" / "i18n.d.ts").exists()
    assert not (settings.output_dir / "types" / "imports.d.ts").exists()
    assert (settings.output_dir / "tsconfig.json").exists()


def test_generate_twice_performs_no_second_write(project) -> None:
    _seed_extension(project)
    project.write({"utils/format.ts": "export function format() {}"})
    project.write_messages("en", {"title": {"message": "Title"}})
    project.configure({"manifest": {"default_locale": "en"}, "imports": {"eslintrc": {"enabled": True}}})
    settings = project.settings()
    entrypoints = find_entrypoints(settings)

    first = TypesGenerator(settings, hooks=[]).generate(entrypoints)
    mtimes = {result.path: result.path.stat().st_mtime_ns for result in first.writes}
    contents = {result.path: result.path.read_text(encoding="utf-8") for result in first.writes}
    second = TypesGenerator(project.settings(), hooks=[]).generate(entrypoints)

    assert all(result.written for result in first.writes)
    assert second.written == []
    assert {result.path: result.path.stat().st_mtime_ns for result in second.writes} == mtimes
    assert {result.path: result.path.read_text(encoding="utf-8") for result in second.writes} == contents


def test_generate_includes_imports_lint_and_i18n_when_enabled(project) -> None:
    _seed_extension(project)
    project.write({"utils/format.ts": "export function format() {}\nexport const VERSION = '1'"})
    project.write_messages("en", {"title": {"message": "Title"}})
    project.configure(
        {
            "manifest": {"default_locale": "en"},
            "imports": {"eslintrc": {"enabled": True, "globals_prop_value": "readonly"}},
        }
    )
    settings = project.settings()

    result = TypesGenerator(settings, hooks=[]).generate(find_entrypoints(settings))

    file_paths = [entry.path for entry in result.entries if isinstance(entry, FileEntry)]
    assert file_paths == [
        "types/imports.d.ts",
        "eslintrc-auto-import.json",
        "types/paths.d.ts",
        "types/i18n.d.ts",
        "types/globals.d.ts",
        "tsconfig.json",
        "wxt.d.ts",
    ]
    eslintrc = json.loads((settings.output_dir / "eslintrc-auto-import.json").read_text(encoding="utf-8"))
    assert eslintrc == {"globals": {"VERSION": "readonly", "format": "readonly"}}
    assert _references(settings.output_dir) == [
        '/// <reference types="wxt/vite-builder-env" />',
        '/// <reference types="./types/imports.d.ts" />',
        '/// <reference types="./types/paths.d.ts" />',
        '/// <reference types="./types/i18n.d.ts" />',
        '/// <reference types="./types/globals.d.ts" />',
    ]
    # Public locale bundles are public assets too.
    paths_text = (settings.output_dir / "types" / "paths.d.ts").read_text(encoding="utf-8")
    assert '| "/_locales/en/messages.json"' in paths_text


def test_generate_references_only_package_modules_with_config_keys(project) -> None:
    project.configure(
        {
            "imports": False,
            "modules": [
                {"id": "@wxt-dev/module-react", "config_key": "react"},
                {"id": "@wxt-dev/auto-icons"},
                {"id": "./modules/analytics", "type": "local", "config_key": "analytics"},
            ],
        }
    )

    result = TypesGenerator(project.settings(), hooks=[]).generate([])

    modules = [entry.module for entry in result.entries if isinstance(entry, ModuleEntry)]
    assert modules == [BUILDER_ENV_MODULE, "@wxt-dev/module-react"]
    paths_text = (project.settings().output_dir / "types" / "paths.d.ts").read_text(encoding="utf-8")
    assert "    | never\n" in paths_text


def test_generate_appends_hook_entries_before_main_declaration(project) -> None:
    project.configure({"imports": False})
    received: list[tuple] = []

    def add_entries(settings, entries):
        received.append(tuple(entries))
        return [
            FileEntry("types/storage.d.ts", "// storage\n", ts_reference=True),
            FileEntry("notes.txt", "not a declaration\n"),
            ModuleEntry("@wxt-dev/storage"),
        ]

    settings = project.settings()
    result = TypesGenerator(settings, hooks=[coerce_hook("storage", add_entries)]).generate([])

    assert [getattr(entry, "path", None) for entry in received[0]][-1] == "tsconfig.json"
    assert result.entries[-1].path == "wxt.d.ts"
    assert (settings.output_dir / "types" / "storage.d.ts").read_text(encoding="utf-8") == "// storage\n"
    assert (settings.output_dir / "notes.txt").exists()
    assert _references(settings.output_dir)[-2:] == [
        '/// <reference types="./types/storage.d.ts" />',
        '/// <reference types="@wxt-dev/storage" />',
    ]


def test_generate_aborts_on_malformed_bundle(project) -> None:
    project.configure({"imports": False, "manifest": {"default_locale": "en"}})
    project.write_messages("en", {}).write_text("{", encoding="utf-8")
    settings = project.settings()

    with pytest.raises(json.JSONDecodeError):
        TypesGenerator(settings, hooks=[]).generate([])

    assert not (settings.output_dir / "wxt.d.ts").exists()


def test_generate_propagates_scan_failures(project) -> None:
    project.configure({"src_dir": "missing-src"})

    with pytest.raises(FileNotFoundError):
        TypesGenerator(project.settings(), hooks=[]).generate([])
