"""OpenAI transpiler: canonical turns to chat-completion messages and back.

Key differences from the canonical schema:
- Role "model" becomes "assistant"; function-call parts become ``tool_calls``.
- Function results become one "tool" message each.
- All-text user content collapses to a plain string.
- Wire responses carry at most one text block per choice; only choice 0 is read.
"""

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from uuid import uuid4

from genbridge.core.interface.errors import ContentGenerationError, MalformedToolArgumentsError
from genbridge.core.interface.models import (
    CanonicalResponse,
    FunctionCallPart,
    FunctionResponsePart,
    InlineDataPart,
    Part,
    TextPart,
    ToolGroup,
    Turn,
    UsageMetadata,
)
from genbridge.utils.fields import get_field

# ---------------------------------------------------------------------------
# Call identifiers
# ---------------------------------------------------------------------------


class CallIdGenerator:
    """Issues tool-call identifiers for one translation pass.

    Identifiers are unique within the pass that created the generator only.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self._prefix = prefix if prefix is not None else uuid4().hex[:8]
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"call_{self._prefix}{self._count}"


# ---------------------------------------------------------------------------
# Parts and tools
# ---------------------------------------------------------------------------


def encode_part(part: Part) -> dict[str, Any] | None:
    """Encode one part as a wire content block.

    Only text and inline data have a content-block form; function parts
    return ``None`` and are dropped by the caller.
    """
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    if isinstance(part, InlineDataPart):
        return {
            "type": "image_url",
            "image_url": {"url": f"data:{part.mime_type};base64,{part.data}"},
        }
    if isinstance(part, FunctionCallPart | FunctionResponsePart):
        return None
    raise TypeError(f"Unsupported part type: {type(part).__name__}")


def encode_parts(parts: Iterable[Part]) -> str | list[dict[str, Any]]:
    """Encode a turn's parts as wire content.

    Returns a newline-joined string when every encoded block is text, and the
    block list otherwise.
    """
    blocks = [block for block in (encode_part(p) for p in parts) if block is not None]
    if all(block["type"] == "text" for block in blocks):
        return "\n".join(block["text"] for block in blocks)
    return blocks


def translate_tools(tools: Sequence[ToolGroup | Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """Convert tool groups to wire function definitions."""
    if not tools:
        return []

    definitions: list[dict[str, Any]] = []
    for raw in tools:
        group = raw if isinstance(raw, ToolGroup) else ToolGroup.model_validate(dict(raw))
        for decl in group.function_declarations:
            definitions.append(
                {
                    "type": "function",
                    "function": {
                        "name": decl.name,
                        "description": decl.description,
                        "parameters": decl.parameters or {"type": "object", "properties": {}},
                    },
                }
            )
    return definitions


# ---------------------------------------------------------------------------
# Transpiler
# ---------------------------------------------------------------------------


class OpenAITranspiler:
    """Converts between canonical turns and OpenAI's chat completion format."""

    def to_provider(
        self, turns: Sequence[Turn], call_ids: CallIdGenerator | None = None
    ) -> list[dict[str, Any]]:
        """Convert turns to wire messages, in order.

        One ``CallIdGenerator`` is shared across the whole pass so that every
        generated tool-call id in the returned messages is distinct.
        """
        ids = call_ids or CallIdGenerator()
        messages: list[dict[str, Any]] = []
        for turn in turns:
            messages.extend(self._turn_to_openai(turn, ids))
        return messages

    def from_provider(self, completion: Any) -> CanonicalResponse:
        """Convert a complete chat completion into a canonical response."""
        choice = _first_choice(completion)
        message = get_field(choice, "message")

        parts: list[Part] = []
        content = get_field(message, "content")
        if content is not None:
            parts.append(TextPart(text=content))

        for tool_call in get_field(message, "tool_calls") or []:
            function = get_field(tool_call, "function")
            if function is None or get_field(tool_call, "type", "function") != "function":
                continue
            name = get_field(function, "name") or ""
            parts.append(
                FunctionCallPart(
                    name=name,
                    args=_parse_arguments(name, get_field(function, "arguments") or "{}"),
                )
            )

        usage = get_field(completion, "usage")
        return CanonicalResponse(
            turn=Turn(role="model", parts=parts),
            usage=_usage(usage),
            finish_reason=get_field(choice, "finish_reason"),
            model=get_field(completion, "model"),
        )

    def from_chunk(self, chunk: Any) -> CanonicalResponse:
        """Convert one stream chunk into a standalone canonical delta.

        No state is kept between chunks. Tool-call deltas without a function
        name are continuation fragments and are skipped; callers that need
        complete multi-chunk arguments must accumulate the raw stream.
        """
        choices = get_field(chunk, "choices") or []
        choice = choices[0] if choices else None
        delta = get_field(choice, "delta")

        parts: list[Part] = []
        content = get_field(delta, "content")
        if content:
            parts.append(TextPart(text=content))

        tool_calls = get_field(delta, "tool_calls")
        for tool_call in tool_calls or []:
            function = get_field(tool_call, "function")
            name = get_field(function, "name")
            if not name:
                continue
            arguments = get_field(function, "arguments")
            parts.append(
                FunctionCallPart(
                    name=name,
                    args=_parse_arguments(name, arguments) if arguments else {},
                )
            )

        usage = get_field(chunk, "usage")
        return CanonicalResponse(
            turn=Turn(role="model", parts=parts),
            usage=_usage(usage) if usage is not None else None,
            finish_reason=get_field(choice, "finish_reason"),
            model=get_field(chunk, "model"),
        )

    def _turn_to_openai(self, turn: Turn, call_ids: CallIdGenerator) -> list[dict[str, Any]]:
        """Convert a single turn to zero or more wire messages."""
        if turn.role == "user":
            return [{"role": "user", "content": encode_parts(turn.parts)}]
        if turn.role == "model":
            return [self._model_turn_to_openai(turn, call_ids)]
        if turn.role == "function":
            return [
                {
                    "role": "tool",
                    "content": _dumps(part.response),
                    # The function name doubles as the correlation key.
                    "tool_call_id": part.name,
                }
                for part in turn.parts
                if isinstance(part, FunctionResponsePart)
            ]
        return []

    def _model_turn_to_openai(self, turn: Turn, call_ids: CallIdGenerator) -> dict[str, Any]:
        texts: list[str] = []
        tool_calls: list[dict[str, Any]] = []
        for part in turn.parts:
            if isinstance(part, TextPart):
                texts.append(part.text)
            elif isinstance(part, FunctionCallPart):
                tool_calls.append(
                    {
                        "id": call_ids(),
                        "type": "function",
                        "function": {"name": part.name, "arguments": _dumps(part.args)},
                    }
                )

        result: dict[str, Any] = {"role": "assistant"}
        if texts:
            result["content"] = "\n".join(texts)
        elif tool_calls:
            result["content"] = None
        else:
            result["content"] = ""
        if tool_calls:
            result["tool_calls"] = tool_calls
        return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _first_choice(completion: Any) -> Any:
    choices = get_field(completion, "choices") or []
    if not choices:
        raise ContentGenerationError("Chat completion has no choices")
    return choices[0]


def _usage(usage: Any) -> UsageMetadata:
    return UsageMetadata(
        prompt_tokens=get_field(usage, "prompt_tokens") or 0,
        completion_tokens=get_field(usage, "completion_tokens") or 0,
        total_tokens=get_field(usage, "total_tokens") or 0,
    )


def _parse_arguments(name: str, raw: str) -> dict[str, Any]:
    """Parse a tool call's JSON argument string."""
    try:
        result = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedToolArgumentsError(name, raw, exc.msg) from exc
    if not isinstance(result, dict):
        raise MalformedToolArgumentsError(name, raw, "expected a JSON object")
    return result


def _dumps(value: Any) -> str:
    """Compact JSON, matching what chat-completion services emit."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
