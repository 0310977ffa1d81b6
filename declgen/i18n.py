"""Parsing for ``_locales/<locale>/messages.json`` bundles."""

from __future__ import annotations

from typing import Any, List, Mapping

from .models import Message


class I18nError(ValueError):
    """Raised when a message bundle has an unexpected shape."""


def parse_i18n_messages(data: Mapping[str, Any]) -> List[Message]:
    """Flatten a parsed messages.json mapping into an ordered message list.

    Keys keep the bundle's order. A value without a ``message`` field is
    treated as a group and its children are named ``<group>_<child>``.
    """
    if not isinstance(data, Mapping):
        raise I18nError("messages.json must contain an object at the root")
    messages: List[Message] = []
    _collect(data, "", messages)
    return messages


def _collect(data: Mapping[str, Any], prefix: str, messages: List[Message]) -> None:
    for key, value in data.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if not isinstance(value, Mapping):
            raise I18nError(f"Message '{name}' must be an object")
        if "message" not in value:
            if not value:
                raise I18nError(f"Message '{name}' is missing the 'message' field")
            _collect(value, name, messages)
            continue
        text = value["message"]
        if not isinstance(text, str):
            raise I18nError(f"Message '{name}' must have a string 'message'")
        description = value.get("description")
        if description is not None and not isinstance(description, str):
            raise I18nError(f"Message '{name}' has a non-string 'description'")
        messages.append(Message(name=name, message=text, description=description))


__all__ = ["I18nError", "parse_i18n_messages"]
