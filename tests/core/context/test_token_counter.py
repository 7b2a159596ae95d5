"""Tests for approximate token counting."""

from collections.abc import Sequence

import pytest

from genbridge.core.context.counter import Encoder, TiktokenEncoder, count_tokens
from genbridge.core.interface.models import FunctionCallPart, InlineDataPart, TextPart, Turn


class CharEncoder:
    """One token per character; makes counts easy to reason about."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def encode(self, text: str) -> Sequence[int]:
        self.calls.append(text)
        return [ord(c) for c in text]


class TestProtocolConformance:
    def test_char_encoder_is_encoder(self) -> None:
        assert isinstance(CharEncoder(), Encoder)

    def test_tiktoken_encoder_is_encoder(self) -> None:
        assert isinstance(TiktokenEncoder("gpt-4o"), Encoder)


class TestCountTokens:
    def test_sums_text_parts(self) -> None:
        encoder = CharEncoder()
        turns = [Turn(role="user", parts=[TextPart(text="a"), TextPart(text="b")])]
        total = count_tokens(turns, encoder)
        assert total == len(encoder.encode("a")) + len(encoder.encode("b"))

    def test_string_contents(self) -> None:
        assert count_tokens("hello", CharEncoder()) == 5

    def test_non_text_parts_count_zero(self) -> None:
        turn = Turn.model(
            TextPart(text="abc"),
            FunctionCallPart(name="lookup", args={"q": "long query"}),
            InlineDataPart(mime_type="image/png", data="AAAA"),
        )
        assert count_tokens([turn], CharEncoder()) == 3

    def test_counts_across_turns(self) -> None:
        turns = [Turn.user("ab"), Turn.model("cde"), Turn.user("f")]
        assert count_tokens(turns, CharEncoder()) == 6

    def test_loose_part_shapes(self) -> None:
        assert count_tokens([{"text": "xy"}, "z", {"inlineData": {"mimeType": "a/b", "data": "q"}}], CharEncoder()) == 3

    def test_non_string_text_part_is_skipped(self) -> None:
        assert count_tokens([{"text": 5}, {"text": "ab"}], CharEncoder()) == 2

    def test_empty_text_is_not_encoded(self) -> None:
        encoder = CharEncoder()
        assert count_tokens([Turn.user("")], encoder) == 0
        assert encoder.calls == []


class TestTiktokenEncoder:
    @pytest.fixture
    def encoder(self) -> TiktokenEncoder:
        return TiktokenEncoder("gpt-4o")

    def test_encode_is_deterministic(self, encoder: TiktokenEncoder) -> None:
        tokens = encoder.encode("Hello world")
        assert len(tokens) > 0
        assert tokens == encoder.encode("Hello world")

    def test_count_matches_encoder(self, encoder: TiktokenEncoder) -> None:
        turns = [Turn(role="user", parts=[TextPart(text="a"), TextPart(text="b")])]
        assert count_tokens(turns, encoder) == len(encoder.encode("a")) + len(encoder.encode("b"))

    def test_provider_prefix_is_stripped(self) -> None:
        assert TiktokenEncoder("openai/gpt-4o").name == TiktokenEncoder("gpt-4o").name

    def test_unknown_model_falls_back_to_cl100k(self) -> None:
        encoder = TiktokenEncoder("totally-unknown-model-xyz")
        assert encoder.name == "cl100k_base"
        assert len(encoder.encode("test")) > 0
