"""Wire-format transpiler implementations."""

from genbridge.core.interface.transpilers.openai import (
    CallIdGenerator,
    OpenAITranspiler,
    encode_part,
    encode_parts,
    translate_tools,
)

__all__ = [
    "CallIdGenerator",
    "OpenAITranspiler",
    "encode_part",
    "encode_parts",
    "translate_tools",
]
