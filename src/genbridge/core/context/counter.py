"""Token counting: approximate counts over canonical text content.

Counts come from tiktoken and are independent of the wire service's own
tokenizer, so they are estimates. Only text parts are counted.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

import tiktoken

from genbridge.core.interface.models import TextPart
from genbridge.core.interface.normalize import normalize_contents

_FALLBACK_ENCODING = "cl100k_base"


@runtime_checkable
class Encoder(Protocol):
    """Anything that turns text into a sequence of token ids."""

    def encode(self, text: str) -> Sequence[int]:
        """Return the token ids for *text*."""
        ...


class TiktokenEncoder:
    """Encoder backed by tiktoken.

    Falls back to ``cl100k_base`` when the model's encoding is unknown.
    """

    def __init__(self, model: str) -> None:
        # Strip a provider prefix: tiktoken expects bare model names.
        name = model.split("/", 1)[-1]
        try:
            self._enc = tiktoken.encoding_for_model(name)
        except KeyError:
            self._enc = tiktoken.get_encoding(_FALLBACK_ENCODING)

    @property
    def name(self) -> str:
        return self._enc.name

    def encode(self, text: str) -> list[int]:
        return self._enc.encode(text)


def count_tokens(contents: Any, encoder: Encoder) -> int:
    """Return the total token count of every text part in *contents*."""
    total = 0
    for turn in normalize_contents(contents):
        for part in turn.parts:
            if isinstance(part, TextPart) and part.text:
                total += len(encoder.encode(part.text))
    return total
