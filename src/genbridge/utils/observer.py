"""Translation observers: diagnostic hooks injected into the generator.

The generator reports raw stream chunks and empty responses to a
``TranslationObserver``. ``NullObserver`` is the default and does nothing;
``LoggingObserver`` writes the same events to the module logger at debug
level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from genbridge.core.interface.models import CanonicalResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class TranslationObserver(Protocol):
    """Receives diagnostic events from wire/canonical translation."""

    def on_stream_chunk(self, chunk: Any) -> None:
        """Called with every raw wire chunk before it is translated."""
        ...

    def on_empty_response(self, response: CanonicalResponse) -> None:
        """Called when a complete response carries no text."""
        ...


class NullObserver:
    """Ignores every event."""

    def on_stream_chunk(self, chunk: Any) -> None:
        _ = chunk

    def on_empty_response(self, response: CanonicalResponse) -> None:
        _ = response


class LoggingObserver:
    """Logs every event at debug level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_stream_chunk(self, chunk: Any) -> None:
        self._log.debug("wire chunk: %r", chunk)

    def on_empty_response(self, response: CanonicalResponse) -> None:
        self._log.debug(
            "wire response has no text; parts=%s",
            [part.model_dump() for part in response.turn.parts],
        )
