"""Canonical content interface & wire translation."""

from genbridge.core.interface.config import ModelConfig
from genbridge.core.interface.errors import ContentGenerationError, MalformedToolArgumentsError
from genbridge.core.interface.models import (
    CanonicalResponse,
    ContentEmbedding,
    CountTokensRequest,
    CountTokensResponse,
    EmbedContentRequest,
    EmbedContentResponse,
    FunctionCallPart,
    FunctionResponsePart,
    GenerateContentRequest,
    GenerationConfig,
    InlineDataPart,
    Part,
    TextPart,
    ToolDeclaration,
    ToolGroup,
    Turn,
    UsageMetadata,
    coerce_part,
)
from genbridge.core.interface.normalize import normalize_contents
from genbridge.core.interface.request import build_chat_request
from genbridge.core.interface.transport import LiteLLMTransport, Transport

__all__ = [
    "CanonicalResponse",
    "ContentEmbedding",
    "ContentGenerationError",
    "CountTokensRequest",
    "CountTokensResponse",
    "EmbedContentRequest",
    "EmbedContentResponse",
    "FunctionCallPart",
    "FunctionResponsePart",
    "GenerateContentRequest",
    "GenerationConfig",
    "InlineDataPart",
    "LiteLLMTransport",
    "MalformedToolArgumentsError",
    "ModelConfig",
    "Part",
    "TextPart",
    "ToolDeclaration",
    "ToolGroup",
    "Transport",
    "Turn",
    "UsageMetadata",
    "build_chat_request",
    "coerce_part",
    "normalize_contents",
]
