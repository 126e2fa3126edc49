"""Provider registry for receipt extraction."""

from __future__ import annotations

import logging

from receipt_pipeline.core.config import get_settings

from .base import BaseProvider, HTTPChatProvider, ProviderResult
from .claude import ClaudeProvider
from .mock import MockProvider
from .openai import OpenAIProvider

logger = logging.getLogger(__name__)

__all__ = ["get_provider", "BaseProvider", "HTTPChatProvider", "ProviderResult", "MockProvider"]

# name -> (provider class, Settings attribute holding its API key)
HTTP_PROVIDERS: dict[str, tuple[type[HTTPChatProvider], str]] = {
    ClaudeProvider.name: (ClaudeProvider, "anthropic_api_key"),
    OpenAIProvider.name: (OpenAIProvider, "openai_api_key"),
}


def get_provider(provider_name: str) -> BaseProvider:
    """Provider for *provider_name*, or ``MockProvider`` when it cannot be used.

    A mock reply is all-null, so the receipt orchestrator treats it as an AI
    miss and falls back to the heuristic parser.
    """
    settings = get_settings()
    name = provider_name.lower().strip()

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in AI_ALLOWED_PROVIDERS, using mock", name)
        return MockProvider()
    if name == MockProvider.name:
        return MockProvider()

    entry = HTTP_PROVIDERS.get(name)
    if entry is None:
        logger.warning("Unknown provider %r, using mock", name)
        return MockProvider()

    provider_cls, key_attr = entry
    api_key = getattr(settings, key_attr)
    if not api_key:
        logger.warning("%s not set, using mock instead of %r", key_attr.upper(), name)
        return MockProvider()
    return provider_cls(api_key=api_key)
