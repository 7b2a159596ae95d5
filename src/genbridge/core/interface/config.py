"""Model configuration: endpoint, credentials and model names."""

import os
from collections.abc import Mapping

from pydantic import BaseModel

DEFAULT_MODEL = "gpt-4o"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_API_BASE = "https://api.openai.com/v1"


class ModelConfig(BaseModel):
    """Configuration for one chat-completion endpoint.

    ``model`` is passed to LiteLLM as is, so a provider prefix
    (``openai/gpt-4o``) is allowed. ``api_base`` points at any
    OpenAI-compatible service.
    """

    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    tokenizer_model: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ModelConfig":
        """Build a config from ``OPENAI_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            model=env.get("OPENAI_MODEL") or DEFAULT_MODEL,
            api_key=env.get("OPENAI_API_KEY") or None,
            api_base=env.get("OPENAI_BASE_URL") or None,
            embedding_model=env.get("OPENAI_EMBEDDING_MODEL") or DEFAULT_EMBEDDING_MODEL,
        )

    @property
    def base_url(self) -> str:
        """The API base URL, without a trailing slash."""
        return (self.api_base or DEFAULT_API_BASE).rstrip("/")
