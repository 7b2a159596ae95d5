"""Local content analysis: token counting and text flattening."""

from genbridge.core.context.counter import Encoder, TiktokenEncoder, count_tokens
from genbridge.core.context.text import extract_text

__all__ = [
    "Encoder",
    "TiktokenEncoder",
    "count_tokens",
    "extract_text",
]
