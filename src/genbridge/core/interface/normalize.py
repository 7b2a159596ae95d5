"""Content normalization: coerce accepted ``contents`` shapes into turns."""

from collections.abc import Mapping, Sequence
from typing import Any

from genbridge.core.interface.models import TextPart, Turn
from genbridge.utils.fields import get_field


def normalize_contents(contents: Any) -> list[Turn]:
    """Return ``contents`` as an ordered list of turns.

    * A non-empty sequence whose first element carries a ``role`` is a list of
      turns; ``Turn`` instances are passed through untouched, role-bearing
      dicts and objects are rebuilt as turns, and later items without a role
      become roleless turns that translate to no wire messages.
    * Any other sequence is the part list of a single user turn.
    * A string becomes a single user turn with one text part.
    * Anything else becomes a single user turn with that value as its only
      part. Nothing is rejected here: unrecognized parts are dropped when the
      turn is built.
    """
    if isinstance(contents, str):
        return [Turn(role="user", parts=[TextPart(text=contents)])]
    if isinstance(contents, Sequence) and not isinstance(contents, bytes):
        if contents and _has_role(contents[0]):
            return [_as_turn(item) for item in contents]
        return [Turn(role="user", parts=list(contents))]
    return [Turn(role="user", parts=[contents])]


def _has_role(value: Any) -> bool:
    if isinstance(value, Mapping):
        return "role" in value
    return hasattr(value, "role")


def _as_turn(value: Any) -> Turn:
    if isinstance(value, Turn):
        return value
    role = get_field(value, "role")
    return Turn(role=str(role) if role is not None else "", parts=get_field(value, "parts"))
