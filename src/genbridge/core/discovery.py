"""Model discovery: list chat-capable models from an OpenAI-compatible endpoint."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from pydantic import BaseModel

from genbridge.core.interface.config import DEFAULT_MODEL, ModelConfig

logger = logging.getLogger(__name__)

# Families that are always chat models, whatever else the id mentions.
_CHAT_FAMILIES = ("gpt", "claude", "llama", "mistral", "mixtral", "gemma", "qwen", "deepseek", "yi")
# Markers of non-chat endpoints (embeddings, speech, images, moderation).
_NON_CHAT_MARKERS = ("embed", "whisper", "dall-e", "tts", "moderation")


class ModelInfo(BaseModel):
    """One entry of the ``/models`` listing."""

    id: str
    object: str = "model"
    created: int = 0
    owned_by: str = ""


FALLBACK_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo(id="gpt-4o", owned_by="openai"),
    ModelInfo(id="gpt-4-turbo-preview", owned_by="openai"),
    ModelInfo(id="gpt-4", owned_by="openai"),
    ModelInfo(id="gpt-3.5-turbo", owned_by="openai"),
)


def is_chat_model(model_id: str) -> bool:
    """Return whether *model_id* looks like a chat-completion model."""
    lowered = model_id.lower()
    if any(family in lowered for family in _CHAT_FAMILIES):
        return True
    return not any(marker in lowered for marker in _NON_CHAT_MARKERS)


def filter_chat_models(models: list[ModelInfo]) -> list[ModelInfo]:
    """Keep chat models only, sorted by id."""
    return sorted((m for m in models if is_chat_model(m.id)), key=lambda m: m.id)


async def fetch_chat_models(
    config: ModelConfig,
    client: httpx.AsyncClient | None = None,
) -> list[ModelInfo]:
    """GET ``{api_base}/models`` and return the chat models it lists.

    Any HTTP or decoding failure is logged and answered with
    :data:`FALLBACK_MODELS`.
    """
    headers: dict[str, str] = {}
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"

    owns_client = client is None
    http = client or httpx.AsyncClient()
    try:
        response = await http.get(f"{config.base_url}/models", headers=headers)
        response.raise_for_status()
        payload: dict[str, Any] = response.json()
        models = [ModelInfo.model_validate(item) for item in payload.get("data", [])]
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to fetch models from %s: %s", config.base_url, exc)
        return list(FALLBACK_MODELS)
    finally:
        if owns_client:
            await http.aclose()

    return filter_chat_models(models)


def default_model() -> str:
    """The model to preselect: ``OPENAI_MODEL`` or ``gpt-4o``."""
    return os.environ.get("OPENAI_MODEL") or DEFAULT_MODEL
