"""OpenAIContentGenerator: canonical content generation over a chat-completion API.

Callers work only with canonical turns and responses. Each call builds a wire
request, hands it to the transport and translates the result back; nothing is
shared between calls.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator, Mapping
from typing import Any

from genbridge.core.context.counter import Encoder, TiktokenEncoder, count_tokens
from genbridge.core.context.text import extract_text
from genbridge.core.interface.config import ModelConfig
from genbridge.core.interface.models import (
    CanonicalResponse,
    ContentEmbedding,
    CountTokensRequest,
    CountTokensResponse,
    EmbedContentRequest,
    EmbedContentResponse,
    GenerateContentRequest,
)
from genbridge.core.interface.request import build_chat_request
from genbridge.core.interface.transpilers.openai import OpenAITranspiler
from genbridge.core.interface.transport import LiteLLMTransport, Transport
from genbridge.utils.fields import get_field
from genbridge.utils.observer import NullObserver, TranslationObserver
from genbridge.utils.telemetry import (
    ATTR_FINISH_REASON,
    ATTR_JSON_MODE,
    ATTR_MESSAGE_COUNT,
    ATTR_MODEL,
    ATTR_PROMPT_ID,
    ATTR_STREAM_CHUNKS,
    ATTR_TOKENS_COMPLETION,
    ATTR_TOKENS_PROMPT,
    ATTR_TOKENS_TOTAL,
    ATTR_TOOL_COUNT,
    get_tracer,
)

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)


class OpenAIContentGenerator:
    """Async canonical content generator backed by an OpenAI-compatible API.

    Usage::

        generator = OpenAIContentGenerator(ModelConfig.from_env())
        response = await generator.generate_content({"contents": "Hello"}, "prompt-1")
        print(response.text)
    """

    def __init__(
        self,
        config: ModelConfig | None = None,
        transport: Transport | None = None,
        encoder: Encoder | None = None,
        observer: TranslationObserver | None = None,
    ) -> None:
        self.config = config or ModelConfig()
        self.transport: Transport = transport or LiteLLMTransport(self.config)
        self.transpiler = OpenAITranspiler()
        self.observer: TranslationObserver = observer or NullObserver()
        self._encoder = encoder

    @property
    def encoder(self) -> Encoder:
        """The tokenizer used by :meth:`count_tokens`, created on first use."""
        if self._encoder is None:
            self._encoder = TiktokenEncoder(self.config.tokenizer_model or self.config.model)
        return self._encoder

    async def generate_content(
        self,
        request: GenerateContentRequest | Mapping[str, Any],
        prompt_id: str,
    ) -> CanonicalResponse:
        """Run one non-streaming generate call."""
        req = _as_request(request)
        payload = build_chat_request(req, req.model or self.config.model, self.transpiler)

        with _tracer.start_as_current_span("genbridge.generate") as span:
            _set_request_attributes(span, payload, prompt_id)
            logger.debug(
                "generate prompt_id=%s model=%s messages=%d",
                prompt_id,
                payload["model"],
                len(payload["messages"]),
            )

            completion = await self.transport.acompletion(**payload)
            response = self.transpiler.from_provider(completion)

            if response.usage is not None:
                span.set_attribute(ATTR_TOKENS_PROMPT, response.usage.prompt_tokens)
                span.set_attribute(ATTR_TOKENS_COMPLETION, response.usage.completion_tokens)
                span.set_attribute(ATTR_TOKENS_TOTAL, response.usage.total_tokens)
            if response.finish_reason is not None:
                span.set_attribute(ATTR_FINISH_REASON, str(response.finish_reason))

        if not response.text:
            self.observer.on_empty_response(response)
        return response

    async def generate_content_stream(
        self,
        request: GenerateContentRequest | Mapping[str, Any],
        prompt_id: str,
    ) -> AsyncIterator[CanonicalResponse]:
        """Open a streaming generate call.

        Awaiting this opens the stream; the returned iterator then yields one
        standalone delta per wire chunk and ends when the stream ends.
        """
        req = _as_request(request)
        payload = build_chat_request(req, req.model or self.config.model, self.transpiler)
        payload["stream"] = True

        with _tracer.start_as_current_span("genbridge.generate_stream.open") as span:
            _set_request_attributes(span, payload, prompt_id)
            logger.debug("generate_stream prompt_id=%s model=%s", prompt_id, payload["model"])
            stream = await self.transport.acompletion(**payload)

        return self._iter_deltas(stream, prompt_id)

    async def _iter_deltas(
        self, stream: AsyncIterable[Any], prompt_id: str
    ) -> AsyncIterator[CanonicalResponse]:
        # Not made current: the span outlives each resumption of this generator.
        span = _tracer.start_span("genbridge.generate_stream")
        span.set_attribute(ATTR_PROMPT_ID, prompt_id)
        chunks = 0
        try:
            async for chunk in stream:
                chunks += 1
                self.observer.on_stream_chunk(chunk)
                yield self.transpiler.from_chunk(chunk)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            span.set_attribute(ATTR_STREAM_CHUNKS, chunks)
            span.end()

    async def count_tokens(
        self, request: CountTokensRequest | Mapping[str, Any]
    ) -> CountTokensResponse:
        """Approximate the token count of the request's text content."""
        req = (
            request
            if isinstance(request, CountTokensRequest)
            else CountTokensRequest.model_validate(dict(request))
        )
        return CountTokensResponse(total_tokens=count_tokens(req.contents, self.encoder))

    async def embed_content(
        self, request: EmbedContentRequest | Mapping[str, Any]
    ) -> EmbedContentResponse:
        """Embed the request's content, flattened to one string."""
        req = (
            request
            if isinstance(request, EmbedContentRequest)
            else EmbedContentRequest.model_validate(dict(request))
        )
        text = extract_text(req.contents)

        with _tracer.start_as_current_span("genbridge.embed") as span:
            span.set_attribute(ATTR_MODEL, self.config.embedding_model)
            response = await self.transport.aembedding(model=self.config.embedding_model, input=[text])

        first = get_field(response, "data")[0]
        values = get_field(first, "embedding")
        return EmbedContentResponse(embeddings=[ContentEmbedding(values=list(values))])


def _as_request(request: GenerateContentRequest | Mapping[str, Any]) -> GenerateContentRequest:
    if isinstance(request, GenerateContentRequest):
        return request
    return GenerateContentRequest.model_validate(dict(request))


def _set_request_attributes(span: Any, payload: dict[str, Any], prompt_id: str) -> None:
    span.set_attribute(ATTR_MODEL, payload["model"])
    span.set_attribute(ATTR_PROMPT_ID, prompt_id)
    span.set_attribute(ATTR_MESSAGE_COUNT, len(payload["messages"]))
    span.set_attribute(ATTR_TOOL_COUNT, len(payload.get("tools", [])))
    span.set_attribute(ATTR_JSON_MODE, "response_format" in payload)
