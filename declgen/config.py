"""Configuration loading for declgen (.declgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

CONFIG_FILENAME = ".declgen.yml"

EslintGlobalsPropValue = Union[bool, str]

_GLOBALS_PROP_VALUES = ("readonly", "readable", "writable", "writeable")
_MODULE_TYPES = ("node_module", "local")
_COMMANDS = ("build", "serve")
_DEFAULT_IMPORT_DIRS = ["components", "composables", "hooks", "utils"]


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class EslintrcOptions:
    """Settings for the generated ESLint globals file."""

    enabled: bool = False
    file_path: str = "eslintrc-auto-import.json"
    globals_prop_value: EslintGlobalsPropValue = True


@dataclass
class ImportsOptions:
    """Auto-import scanner settings."""

    dirs: List[str] = field(default_factory=lambda: list(_DEFAULT_IMPORT_DIRS))
    imports: List[Dict[str, str]] = field(default_factory=list)
    eslintrc: EslintrcOptions = field(default_factory=EslintrcOptions)


@dataclass
class ModuleInfo:
    """A build module, installed from a package registry or defined locally."""

    id: str
    type: str = "node_module"
    config_key: Optional[str] = None


@dataclass
class ManifestOptions:
    """Subset of the extension manifest relevant to declarations."""

    default_locale: Optional[str] = None


@dataclass
class BuildSettings:
    """Resolved build configuration consumed by the types generator.

    ``out_base_dir`` (YAML key ``out_base_dir``) holds every build; ``out_dir`` is
    derived as ``<out_base_dir>/<browser>-mv<manifest_version>`` and is not
    configurable. ``output_dir`` is where the generated types are written.
    """

    root: Path
    src_dir: Path
    public_dir: Path
    entrypoints_dir: Path
    out_base_dir: Path
    out_dir: Path
    output_dir: Path
    types_dir: Path
    browser: str = "chrome"
    manifest_version: int = 3
    command: str = "build"
    mode: str = "production"
    imports: Optional[ImportsOptions] = field(default_factory=ImportsOptions)
    modules: List[ModuleInfo] = field(default_factory=list)
    alias: Dict[str, Path] = field(default_factory=dict)
    manifest: ManifestOptions = field(default_factory=ManifestOptions)
    hooks: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> BuildSettings:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
    return resolve_settings(root, data)


def resolve_settings(root: Path, data: Dict[str, Any]) -> BuildSettings:
    """Build ``BuildSettings`` from a raw config mapping rooted at ``root``."""
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    root = Path(root).resolve()
    src_dir = _resolve_dir(root, data.get("src_dir"), ".")
    public_dir = _resolve_dir(src_dir, data.get("public_dir"), "public")
    entrypoints_dir = _resolve_dir(src_dir, data.get("entrypoints_dir"), "entrypoints")
    output_dir = _resolve_dir(root, data.get("output_dir"), ".wxt")
    out_base_dir = _resolve_dir(root, data.get("out_base_dir"), ".output")

    browser = _as_str(data.get("browser")) or "chrome"
    manifest_version = _as_int(data.get("manifest_version"))
    if manifest_version is None:
        manifest_version = 2 if browser in ("firefox", "safari") else 3
    if manifest_version not in (2, 3):
        raise ConfigError(f"manifest_version must be 2 or 3, got {manifest_version}")

    command = _as_str(data.get("command")) or "build"
    if command not in _COMMANDS:
        raise ConfigError(f"command must be one of {', '.join(_COMMANDS)}, got '{command}'")
    mode = _as_str(data.get("mode")) or ("production" if command == "build" else "development")

    alias: Dict[str, Path] = {
        "~~": root,
        "@@": root,
        "~": src_dir,
        "@": src_dir,
    }
    alias_data = data.get("alias")
    if alias_data is not None and not isinstance(alias_data, dict):
        raise ConfigError("alias must be a mapping of alias name to path")
    for name, target in _as_dict(alias_data).items():
        target_str = _as_str(target)
        if not target_str:
            raise ConfigError(f"alias '{name}' must map to a path")
        alias[str(name)] = (root / target_str).resolve()

    manifest_data = _as_dict(data.get("manifest"))
    manifest = ManifestOptions(default_locale=_as_str(manifest_data.get("default_locale")))

    return BuildSettings(
        root=root,
        src_dir=src_dir,
        public_dir=public_dir,
        entrypoints_dir=entrypoints_dir,
        out_base_dir=out_base_dir,
        out_dir=out_base_dir / f"{browser}-mv{manifest_version}",
        output_dir=output_dir,
        types_dir=output_dir / "types",
        browser=browser,
        manifest_version=manifest_version,
        command=command,
        mode=mode,
        imports=_parse_imports(data.get("imports", {})),
        modules=_parse_modules(data.get("modules")),
        alias=alias,
        manifest=manifest,
        hooks=_as_str_list(data.get("hooks")),
    )


def _parse_imports(value: Any) -> Optional[ImportsOptions]:
    if value is False:
        return None
    if value is None or value is True:
        return ImportsOptions()
    if not isinstance(value, dict):
        raise ConfigError("imports must be false or a mapping")

    options = ImportsOptions()
    if "dirs" in value:
        options.dirs = _as_str_list(value.get("dirs"))

    for item in value.get("imports") or []:
        if not isinstance(item, dict) or not _as_str(item.get("name")) or not _as_str(item.get("from")):
            raise ConfigError("imports.imports entries require 'name' and 'from'")
        preset = {"name": str(item["name"]), "from": str(item["from"])}
        alias = _as_str(item.get("as"))
        if alias:
            preset["as"] = alias
        options.imports.append(preset)

    eslintrc_data = _as_dict(value.get("eslintrc"))
    if eslintrc_data:
        enabled = _as_bool(eslintrc_data.get("enabled"))
        options.eslintrc.enabled = bool(enabled)
        file_path = _as_str(eslintrc_data.get("file_path"))
        if file_path:
            options.eslintrc.file_path = file_path
        if "globals_prop_value" in eslintrc_data:
            options.eslintrc.globals_prop_value = _as_globals_prop_value(
                eslintrc_data.get("globals_prop_value")
            )
    return options


def _parse_modules(value: Any) -> List[ModuleInfo]:
    modules: List[ModuleInfo] = []
    if value is None:
        return modules
    if not isinstance(value, list):
        raise ConfigError("modules must be a list")
    for item in value:
        if isinstance(item, str):
            modules.append(ModuleInfo(id=item))
            continue
        if not isinstance(item, dict) or not _as_str(item.get("id")):
            raise ConfigError("modules entries require an 'id'")
        module_type = _as_str(item.get("type")) or "node_module"
        if module_type not in _MODULE_TYPES:
            raise ConfigError(f"Unknown module type '{module_type}' for module '{item['id']}'")
        modules.append(
            ModuleInfo(
                id=str(item["id"]),
                type=module_type,
                config_key=_as_str(item.get("config_key")),
            )
        )
    return modules


def _as_globals_prop_value(value: Any) -> EslintGlobalsPropValue:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value in _GLOBALS_PROP_VALUES:
        return value
    allowed = ", ".join(("true", "false") + _GLOBALS_PROP_VALUES)
    raise ConfigError(f"imports.eslintrc.globals_prop_value must be one of {allowed}")


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_dir(base: Path, value: Any, default: str) -> Path:
    relative = _as_str(value) or default
    return (base / relative).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BuildSettings",
    "ConfigError",
    "EslintGlobalsPropValue",
    "EslintrcOptions",
    "ImportsOptions",
    "ManifestOptions",
    "ModuleInfo",
    "load_config",
    "resolve_settings",
]
