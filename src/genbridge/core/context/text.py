"""Flatten nested content into one string for embedding calls."""

from collections.abc import Mapping
from typing import Any


def extract_text(content: Any) -> str:
    """Recursively flatten *content* into a single string.

    A string is returned as is. Anything carrying ``parts`` (attribute or
    mapping key) becomes its parts' non-empty texts joined by single spaces;
    a list or tuple is flattened the same way. Anything carrying ``text``
    yields that text. Everything else yields ``""``.
    """
    if isinstance(content, str):
        return content
    parts = _lookup(content, "parts")
    if parts is not None:
        return _join(parts)
    if isinstance(content, list | tuple):
        return _join(content)
    return _lookup(content, "text") or ""


def _join(items: Any) -> str:
    texts = (extract_text(item) for item in items)
    return " ".join(text for text in texts if text)


def _lookup(content: Any, name: str) -> Any:
    if isinstance(content, Mapping):
        return content.get(name)
    return getattr(content, name, None)
