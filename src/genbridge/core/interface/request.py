"""Request builder: assembles chat-completion keyword arguments."""

import json
from typing import Any

from genbridge.core.interface.models import GenerateContentRequest, GenerationConfig
from genbridge.core.interface.normalize import normalize_contents
from genbridge.core.interface.transpilers.openai import OpenAITranspiler, translate_tools

JSON_MIME_TYPE = "application/json"

_JSON_SCHEMA_INSTRUCTION = (
    "You must respond with valid JSON that conforms to this schema: {schema}. "
    "Return ONLY the JSON object, no additional text."
)

DEFAULT_TEMPERATURE = 0.0
DEFAULT_TOP_P = 1.0


def build_chat_request(
    request: GenerateContentRequest,
    model: str,
    transpiler: OpenAITranspiler | None = None,
) -> dict[str, Any]:
    """Build the wire request for *request*.

    Message order is ``[system instruction, JSON schema instruction, *turns]``,
    each of the first two present only when configured. ``tools``,
    ``max_tokens`` and ``response_format`` are omitted when unset.
    """
    transpiler = transpiler or OpenAITranspiler()
    config = request.config or GenerationConfig()
    legacy = request.generation_config or GenerationConfig()

    messages = transpiler.to_provider(normalize_contents(request.contents))

    response_format: dict[str, Any] | None = None
    if config.response_mime_type == JSON_MIME_TYPE and config.response_json_schema is not None:
        messages.insert(0, {"role": "system", "content": json_schema_instruction(config.response_json_schema)})
        response_format = {"type": "json_object"}

    if config.system_instruction:
        messages.insert(0, {"role": "system", "content": config.system_instruction})

    payload: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": _first_set(config.temperature, legacy.temperature, DEFAULT_TEMPERATURE),
        "top_p": _first_set(config.top_p, legacy.top_p, DEFAULT_TOP_P),
    }

    max_tokens = _first_set(config.max_output_tokens, legacy.max_output_tokens, None)
    if max_tokens is not None:
        payload["max_tokens"] = max_tokens

    tools = translate_tools(request.tools)
    if tools:
        payload["tools"] = tools

    if response_format is not None:
        payload["response_format"] = response_format

    return payload


def json_schema_instruction(schema: Any) -> str:
    """Return the system prompt that asks for JSON matching *schema*."""
    schema_json = json.dumps(schema, separators=(",", ":"), ensure_ascii=False)
    return _JSON_SCHEMA_INSTRUCTION.format(schema=schema_json)


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None
