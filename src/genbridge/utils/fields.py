"""Uniform field access for wire objects.

LiteLLM returns attribute-style response objects while recorded fixtures and
raw HTTP payloads are plain dicts; both are read the same way.
"""

from collections.abc import Mapping
from typing import Any


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read *name* from a mapping or an attribute-style object."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)
