"""Transport: the network side of a generate or embed call.

The generator only needs two coroutines. ``LiteLLMTransport`` provides them
through LiteLLM; tests and embedders can pass any object with the same shape.
Failures are raised unchanged: no retries, no classification.
"""

from typing import Any, Protocol

import litellm

from genbridge.core.interface.config import ModelConfig


class Transport(Protocol):
    """Executes chat-completion and embedding calls."""

    async def acompletion(self, **kwargs: Any) -> Any:
        """Create a chat completion. With ``stream=True`` returns an async iterable of chunks."""
        ...

    async def aembedding(self, **kwargs: Any) -> Any:
        """Create an embedding."""
        ...


class LiteLLMTransport:
    """Transport backed by ``litellm.acompletion`` / ``litellm.aembedding``."""

    def __init__(self, config: ModelConfig) -> None:
        self.config = config

    def _auth_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            kwargs["api_base"] = self.config.api_base
        return kwargs

    async def acompletion(self, **kwargs: Any) -> Any:
        # LiteLLM type stubs are incomplete
        return await litellm.acompletion(**kwargs, **self._auth_kwargs())  # pyright: ignore[reportUnknownMemberType]

    async def aembedding(self, **kwargs: Any) -> Any:
        return await litellm.aembedding(**kwargs, **self._auth_kwargs())  # pyright: ignore[reportUnknownMemberType]
