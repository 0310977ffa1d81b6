"""Build-time globals exposed to generated declarations."""

from __future__ import annotations

from typing import List

from .config import BuildSettings
from .models import GlobalVar


def get_globals(settings: BuildSettings) -> List[GlobalVar]:
    """Return the build-wide constants derived from the configuration."""
    return [
        GlobalVar(name="MANIFEST_VERSION", value=settings.manifest_version, type="2 | 3"),
        GlobalVar(name="BROWSER", value=settings.browser, type="string"),
        GlobalVar(name="CHROME", value=settings.browser == "chrome", type="boolean"),
        GlobalVar(name="FIREFOX", value=settings.browser == "firefox", type="boolean"),
        GlobalVar(name="SAFARI", value=settings.browser == "safari", type="boolean"),
        GlobalVar(name="EDGE", value=settings.browser == "edge", type="boolean"),
        GlobalVar(name="OPERA", value=settings.browser == "opera", type="boolean"),
        GlobalVar(name="COMMAND", value=settings.command, type='"build" | "serve"'),
        GlobalVar(name="MODE", value=settings.mode, type="string"),
    ]


def get_entrypoint_globals(entrypoint_name: str) -> List[GlobalVar]:
    """Return constants whose value depends on the entrypoint being bundled."""
    return [GlobalVar(name="ENTRYPOINT", value=entrypoint_name, type="string")]


__all__ = ["get_entrypoint_globals", "get_globals"]
