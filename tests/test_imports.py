"""Tests for the auto-import scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from declgen.config import ImportsOptions
from declgen.models import Import
from declgen.imports import UnimportScanner


def _exposed(imports) -> list[str]:
    return [item.as_ or item.name for item in imports]


def test_scan_collects_named_and_default_exports(project) -> None:
    project.write(
        {
            "utils/math.ts": """
                export function add(a: number, b: number) { return a + b }
                export const PI = 3.14
                export async function fetchAll() {}
                export type Shape = { sides: number }
                const hidden = 1
                export { hidden as visible }
            """,
            "composables/use-counter.ts": """
                export default function () { return 0 }
            """,
            "utils/types.d.ts": "export declare const ignored: string",
            "components/Button.tsx": "export class Button {}",
        }
    )
    scanner = UnimportScanner(ImportsOptions())

    scanner.scan_imports_from_dir(cwd=project.path())

    assert sorted(_exposed(scanner.get_imports())) == ["Button", "PI", "add", "fetchAll", "useCounter", "visible"]
    default_import = next(item for item in scanner.get_imports() if item.as_ == "useCounter")
    assert default_import.name == "default"


def test_scan_skips_missing_directories_but_requires_source_root(tmp_path: Path) -> None:
    scanner = UnimportScanner(ImportsOptions())
    (tmp_path / "src").mkdir()

    assert scanner.scan_imports_from_dir(cwd=tmp_path / "src") == []
    with pytest.raises(FileNotFoundError):
        scanner.scan_imports_from_dir(cwd=tmp_path / "missing")


def test_configured_imports_take_precedence_over_scanned(project) -> None:
    project.write({"utils/browser.ts": "export const browser = {}\nexport const storage = {}"})
    options = ImportsOptions(imports=[{"name": "browser", "from": "wxt/browser"}])
    scanner = UnimportScanner(options)

    scanner.scan_imports_from_dir(cwd=project.path())

    imports = scanner.get_imports()
    assert _exposed(imports) == ["browser", "storage"]
    assert imports[0] == Import(name="browser", from_="wxt/browser")


def test_generate_type_declarations_uses_relative_specifiers(project) -> None:
    project.write({"utils/math.ts": "export function add() {}"})
    options = ImportsOptions(imports=[{"name": "defineConfig", "from": "wxt", "as": "defineWxtConfig"}])
    scanner = UnimportScanner(options)
    scanner.scan_imports_from_dir(cwd=project.path())

    text = scanner.generate_type_declarations(relative_to=project.path() / ".wxt" / "types")

    assert text.splitlines() == [
        "export {}",
        "declare global {",
        "  const add: typeof import('../../utils/math')['add']",
        "  const defineWxtConfig: typeof import('wxt')['defineConfig']",
        "}",
    ]
