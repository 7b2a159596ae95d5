"""Canonical content schema: provider-agnostic turns, parts and requests.

Turns are ordered lists of typed parts. The wire transpiler converts these to
chat-completion messages and converts completions back into
``CanonicalResponse`` objects, so callers never see the wire format.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

# ---------------------------------------------------------------------------
# Parts: exactly one variant per instance
# ---------------------------------------------------------------------------


class _CanonicalModel(BaseModel):
    """Base for canonical models: snake_case fields, camelCase aliases accepted."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TextPart(_CanonicalModel):
    """Plain text."""

    type: Literal["text"] = "text"
    text: str


class InlineDataPart(_CanonicalModel):
    """Inline binary payload, base64 encoded."""

    type: Literal["inline_data"] = "inline_data"
    mime_type: str = Field(alias="mimeType")
    data: str


class FunctionCallPart(_CanonicalModel):
    """A function invocation requested by the model."""

    type: Literal["function_call"] = "function_call"
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionResponsePart(_CanonicalModel):
    """The result of a function invocation, sent back to the model."""

    type: Literal["function_response"] = "function_response"
    name: str
    response: Any = None


Part = Annotated[
    TextPart | InlineDataPart | FunctionCallPart | FunctionResponsePart,
    Field(discriminator="type"),
]

_part_adapter: TypeAdapter[Part] = TypeAdapter(Part)

# Gemini-style single-key part shapes and the variant each one maps to.
_KEYED_SHAPES: dict[str, type[BaseModel]] = {
    "inlineData": InlineDataPart,
    "inline_data": InlineDataPart,
    "functionCall": FunctionCallPart,
    "function_call": FunctionCallPart,
    "functionResponse": FunctionResponsePart,
    "function_response": FunctionResponsePart,
}


def coerce_part(value: Any) -> Part | None:
    """Coerce a loosely shaped part into the canonical union.

    Accepts a typed part, a bare string, a typed dict (``{"type": ...}``),
    Gemini-style dicts (``{"text": ...}``, ``{"inlineData": {...}}``,
    ``{"functionCall": {...}}``, ``{"functionResponse": {...}}``) and any
    object exposing a string ``text`` attribute. Returns ``None`` for
    anything else.
    """
    if isinstance(value, TextPart | InlineDataPart | FunctionCallPart | FunctionResponsePart):
        return value
    if isinstance(value, str):
        return TextPart(text=value)
    if isinstance(value, Mapping):
        return _coerce_mapping(value)
    text = getattr(value, "text", None)
    if isinstance(text, str):
        return TextPart(text=text)
    return None


def _coerce_mapping(value: Mapping[str, Any]) -> Part | None:
    if "type" in value:
        try:
            return _part_adapter.validate_python(dict(value))
        except ValidationError:
            return None
    if "text" in value:
        text = value["text"]
        if text is None:
            return TextPart(text="")
        return TextPart(text=text) if isinstance(text, str) else None
    for key, variant in _KEYED_SHAPES.items():
        payload = value.get(key)
        if isinstance(payload, Mapping):
            try:
                part: Part = variant.model_validate(dict(payload))  # type: ignore[assignment]
            except ValidationError:
                return None
            return part
    return None


# ---------------------------------------------------------------------------
# Turns
# ---------------------------------------------------------------------------

class Turn(_CanonicalModel):
    """One exchange unit: a role plus an ordered list of parts.

    Known roles are ``user``, ``model`` and ``function``. Other role strings
    are accepted and carried, but translate to no wire messages.
    """

    role: str
    parts: list[Part] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def coerce_parts(cls, value: Any) -> list[Any]:
        if value is None:
            return []
        if isinstance(value, str | bytes) or not isinstance(value, list | tuple):
            value = [value]
        coerced = (coerce_part(item) for item in value)
        return [part for part in coerced if part is not None]

    @classmethod
    def user(cls, *parts: Any) -> "Turn":
        """Create a user turn."""
        return cls(role="user", parts=list(parts))

    @classmethod
    def model(cls, *parts: Any) -> "Turn":
        """Create a model turn."""
        return cls(role="model", parts=list(parts))

    @classmethod
    def function(cls, *parts: Any) -> "Turn":
        """Create a function-result turn."""
        return cls(role="function", parts=list(parts))


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class ToolDeclaration(_CanonicalModel):
    """A callable the model may invoke."""

    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = Field(default=None, alias="parametersSchema")


class ToolGroup(_CanonicalModel):
    """A group of function declarations offered together."""

    function_declarations: list[ToolDeclaration] = Field(
        default_factory=list, alias="functionDeclarations"
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class GenerationConfig(_CanonicalModel):
    """Sampling parameters and output directives for one request."""

    temperature: float | None = None
    top_p: float | None = Field(default=None, alias="topP")
    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")
    system_instruction: str | None = Field(default=None, alias="systemInstruction")
    response_mime_type: str | None = Field(default=None, alias="responseMimeType")
    response_json_schema: Any = Field(default=None, alias="responseJsonSchema")


class GenerateContentRequest(_CanonicalModel):
    """A generate call.

    ``contents`` is left untyped: it may be a string, a part, a list of parts
    or a list of turns, and is normalized at translation time. ``config``
    takes precedence over the legacy ``generation_config``.
    """

    model: str | None = None
    contents: Any
    config: GenerationConfig | None = None
    generation_config: GenerationConfig | None = Field(default=None, alias="generationConfig")
    tools: list[ToolGroup] | None = None


class CountTokensRequest(_CanonicalModel):
    contents: Any


class EmbedContentRequest(_CanonicalModel):
    contents: Any


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UsageMetadata(_CanonicalModel):
    """Token accounting reported by the wire service."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CanonicalResponse(_CanonicalModel):
    """A complete response or one streamed delta."""

    turn: Turn
    usage: UsageMetadata | None = None
    finish_reason: str | None = None
    model: str | None = None

    @property
    def text(self) -> str:
        """Value of the first text part, or ``""`` when there is none."""
        for part in self.turn.parts:
            if isinstance(part, TextPart):
                return part.text
        return ""

    @property
    def function_calls(self) -> list[FunctionCallPart]:
        """All function-call parts, in order."""
        return [part for part in self.turn.parts if isinstance(part, FunctionCallPart)]


class CountTokensResponse(_CanonicalModel):
    total_tokens: int


class ContentEmbedding(_CanonicalModel):
    values: list[float]


class EmbedContentResponse(_CanonicalModel):
    embeddings: list[ContentEmbedding]
