"""Tests for OpenAIContentGenerator: unit tests with a mocked transport."""

from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from genbridge.core.interface.config import ModelConfig
from genbridge.core.interface.errors import MalformedToolArgumentsError
from genbridge.core.interface.generator import OpenAIContentGenerator
from genbridge.core.interface.models import (
    CanonicalResponse,
    FunctionCallPart,
    GenerateContentRequest,
    TextPart,
    Turn,
)
from genbridge.core.interface.transport import LiteLLMTransport


def _completion(content: str | None = "Hello!", **extra: Any) -> dict[str, Any]:
    return {
        "model": "gpt-4o",
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        **extra,
    }


async def _stream(*chunks: dict[str, Any]) -> AsyncIterator[dict[str, Any]]:
    for chunk in chunks:
        yield chunk


class CharEncoder:
    def encode(self, text: str) -> list[int]:
        return [ord(c) for c in text]


@pytest.fixture
def transport() -> MagicMock:
    mock = MagicMock()
    mock.acompletion = AsyncMock(return_value=_completion())
    mock.aembedding = AsyncMock(return_value={"data": [{"embedding": [0.1, 0.2, 0.3]}]})
    return mock


@pytest.fixture
def observer() -> MagicMock:
    return MagicMock()


@pytest.fixture
def generator(transport: MagicMock, observer: MagicMock) -> OpenAIContentGenerator:
    return OpenAIContentGenerator(
        ModelConfig(model="gpt-4o", embedding_model="text-embedding-3-small"),
        transport=transport,
        encoder=CharEncoder(),
        observer=observer,
    )


class TestGenerateContent:
    async def test_text_response(self, generator: OpenAIContentGenerator) -> None:
        response = await generator.generate_content({"contents": "Hello"}, "p-1")

        assert isinstance(response, CanonicalResponse)
        assert response.text == "Hello!"
        assert response.usage is not None
        assert response.usage.total_tokens == 15

    async def test_passes_wire_request(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        await generator.generate_content(
            {
                "contents": [Turn.user("Hi")],
                "config": {"systemInstruction": "Be nice.", "maxOutputTokens": 32},
                "tools": [{"functionDeclarations": [{"name": "lookup"}]}],
            },
            "p-1",
        )

        kwargs = transport.acompletion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be nice."},
            {"role": "user", "content": "Hi"},
        ]
        assert kwargs["max_tokens"] == 32
        assert kwargs["temperature"] == 0.0
        assert kwargs["top_p"] == 1.0
        assert kwargs["tools"][0]["function"]["name"] == "lookup"
        assert "stream" not in kwargs

    async def test_request_model_overrides_config(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        await generator.generate_content(GenerateContentRequest(model="gpt-4o-mini", contents="x"), "p-1")
        assert transport.acompletion.call_args.kwargs["model"] == "gpt-4o-mini"

    async def test_json_mode(self, generator: OpenAIContentGenerator, transport: MagicMock) -> None:
        await generator.generate_content(
            {
                "contents": "Hello",
                "config": {"responseMimeType": "application/json", "responseJsonSchema": {"type": "object"}},
            },
            "p-1",
        )
        kwargs = transport.acompletion.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert '"type":"object"' in kwargs["messages"][0]["content"]

    async def test_tool_call_response(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.return_value = {
            "choices": [
                {
                    "message": {
                        "content": None,
                        "tool_calls": [
                            {"id": "c1", "type": "function", "function": {"name": "lookup", "arguments": '{"q":"x"}'}}
                        ],
                    }
                }
            ]
        }
        response = await generator.generate_content({"contents": "Hi"}, "p-1")
        assert response.turn.parts == [FunctionCallPart(name="lookup", args={"q": "x"})]

    async def test_empty_response_notifies_observer(
        self, generator: OpenAIContentGenerator, transport: MagicMock, observer: MagicMock
    ) -> None:
        transport.acompletion.return_value = _completion(content=None)
        response = await generator.generate_content({"contents": "Hi"}, "p-1")
        observer.on_empty_response.assert_called_once_with(response)

    async def test_text_response_does_not_notify_observer(
        self, generator: OpenAIContentGenerator, observer: MagicMock
    ) -> None:
        await generator.generate_content({"contents": "Hi"}, "p-1")
        observer.on_empty_response.assert_not_called()

    async def test_malformed_arguments_propagate(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.return_value = {
            "choices": [
                {"message": {"content": None, "tool_calls": [{"function": {"name": "f", "arguments": "{oops"}}]}}
            ]
        }
        with pytest.raises(MalformedToolArgumentsError):
            await generator.generate_content({"contents": "Hi"}, "p-1")

    async def test_transport_errors_propagate_unchanged(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        error = ConnectionError("boom")
        transport.acompletion.side_effect = error
        with pytest.raises(ConnectionError) as excinfo:
            await generator.generate_content({"contents": "Hi"}, "p-1")
        assert excinfo.value is error

    async def test_failed_call_does_not_affect_next_call(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.side_effect = [ConnectionError("boom"), _completion("recovered")]
        with pytest.raises(ConnectionError):
            await generator.generate_content({"contents": "Hi"}, "p-1")
        response = await generator.generate_content({"contents": "Hi"}, "p-2")
        assert response.text == "recovered"


class TestGenerateContentStream:
    async def test_yields_one_delta_per_chunk(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.return_value = _stream(
            {"choices": [{"delta": {"content": "Hi"}}]},
            {"choices": [{"delta": {"content": " there"}}]},
        )

        deltas = [d async for d in await generator.generate_content_stream({"contents": "Hello"}, "p-1")]

        assert [d.text for d in deltas] == ["Hi", " there"]
        assert transport.acompletion.call_args.kwargs["stream"] is True

    async def test_chunks_reach_observer(
        self, generator: OpenAIContentGenerator, transport: MagicMock, observer: MagicMock
    ) -> None:
        chunk = {"choices": [{"delta": {"content": "x"}}]}
        transport.acompletion.return_value = _stream(chunk)

        async for _ in await generator.generate_content_stream({"contents": "Hello"}, "p-1"):
            pass

        observer.on_stream_chunk.assert_called_once_with(chunk)

    async def test_tool_call_deltas(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.return_value = _stream(
            {"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"name": "f", "arguments": ""}}]}}]},
            {"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": '{"a":1}'}}]}}]},
        )

        deltas = [d async for d in await generator.generate_content_stream({"contents": "Hi"}, "p-1")]

        assert deltas[0].turn.parts == [FunctionCallPart(name="f", args={})]
        assert deltas[1].turn.parts == []

    async def test_empty_stream(self, generator: OpenAIContentGenerator, transport: MagicMock) -> None:
        transport.acompletion.return_value = _stream()
        deltas = [d async for d in await generator.generate_content_stream({"contents": "Hi"}, "p-1")]
        assert deltas == []

    async def test_stream_is_lazy(self, generator: OpenAIContentGenerator, transport: MagicMock) -> None:
        pulled: list[int] = []

        async def source() -> AsyncIterator[dict[str, Any]]:
            for i in range(3):
                pulled.append(i)
                yield {"choices": [{"delta": {"content": str(i)}}]}

        transport.acompletion.return_value = source()
        deltas = await generator.generate_content_stream({"contents": "Hi"}, "p-1")
        assert pulled == []

        first = await deltas.__anext__()
        assert first.text == "0"
        assert pulled == [0]

    async def test_early_exit_closes_upstream(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        closed: list[bool] = []

        async def source() -> AsyncIterator[dict[str, Any]]:
            try:
                for i in range(3):
                    yield {"choices": [{"delta": {"content": str(i)}}]}
            finally:
                closed.append(True)

        transport.acompletion.return_value = source()
        deltas = await generator.generate_content_stream({"contents": "Hi"}, "p-1")

        await deltas.__anext__()
        await deltas.aclose()

        assert closed == [True]

    async def test_open_failure_raises_on_await(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        transport.acompletion.side_effect = TimeoutError("slow")
        with pytest.raises(TimeoutError):
            await generator.generate_content_stream({"contents": "Hi"}, "p-1")


class TestCountTokens:
    async def test_counts_text_parts(self, generator: OpenAIContentGenerator) -> None:
        result = await generator.count_tokens(
            {"contents": [Turn(role="user", parts=[TextPart(text="a"), TextPart(text="b")])]}
        )
        assert result.total_tokens == 2

    async def test_no_network(self, generator: OpenAIContentGenerator, transport: MagicMock) -> None:
        await generator.count_tokens({"contents": "hello"})
        transport.acompletion.assert_not_called()
        transport.aembedding.assert_not_called()


class TestEmbedContent:
    async def test_embeds_flattened_text(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        result = await generator.embed_content(
            {"contents": {"parts": [{"text": "a"}, {"text": ""}, {"text": "b"}]}}
        )

        assert result.embeddings[0].values == [0.1, 0.2, 0.3]
        transport.aembedding.assert_awaited_once_with(model="text-embedding-3-small", input=["a b"])

    async def test_attribute_style_embedding_response(
        self, generator: OpenAIContentGenerator, transport: MagicMock
    ) -> None:
        item = MagicMock()
        item.embedding = [1.0, 2.0]
        response = MagicMock()
        response.data = [item]
        transport.aembedding.return_value = response

        result = await generator.embed_content({"contents": "text"})
        assert result.embeddings[0].values == [1.0, 2.0]


class TestLiteLLMTransport:
    @patch("genbridge.core.interface.transport.litellm")
    async def test_completion_adds_credentials(self, mock_litellm: MagicMock) -> None:
        mock_litellm.acompletion = AsyncMock(return_value=_completion())
        transport = LiteLLMTransport(ModelConfig(api_key="sk-test", api_base="http://localhost:8000/v1"))

        await transport.acompletion(model="gpt-4o", messages=[])

        kwargs = mock_litellm.acompletion.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["api_base"] == "http://localhost:8000/v1"
        assert kwargs["model"] == "gpt-4o"

    @patch("genbridge.core.interface.transport.litellm")
    async def test_no_credentials_when_unset(self, mock_litellm: MagicMock) -> None:
        mock_litellm.aembedding = AsyncMock(return_value={"data": []})
        transport = LiteLLMTransport(ModelConfig())

        await transport.aembedding(model="text-embedding-3-small", input=["x"])

        kwargs = mock_litellm.aembedding.call_args.kwargs
        assert "api_key" not in kwargs
        assert "api_base" not in kwargs

    @patch("genbridge.core.interface.transport.litellm")
    async def test_generator_uses_litellm_by_default(self, mock_litellm: MagicMock) -> None:
        mock_litellm.acompletion = AsyncMock(return_value=_completion("via litellm"))
        generator = OpenAIContentGenerator(ModelConfig(model="gpt-4o"))

        response = await generator.generate_content({"contents": "Hi"}, "p-1")

        assert response.text == "via litellm"
        mock_litellm.acompletion.assert_awaited_once()
