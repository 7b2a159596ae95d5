"""genbridge: canonical conversational content over chat-completion APIs."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from genbridge.core.interface.config import ModelConfig as ModelConfig
    from genbridge.core.interface.generator import OpenAIContentGenerator as OpenAIContentGenerator

_LAZY_EXPORTS = {
    "OpenAIContentGenerator": "genbridge.core.interface.generator",
    "ModelConfig": "genbridge.core.interface.config",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'genbridge' has no attribute {name!r}")
