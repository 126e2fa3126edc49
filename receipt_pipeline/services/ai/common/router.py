"""Pick the provider, model and call limits for one receipt extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from receipt_pipeline.core.config import Settings, get_settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    provider: BaseProvider
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float


def _override(settings: Settings, value: str | None) -> str:
    if not settings.enable_ai_overrides or not value:
        return ""
    return value.strip()


def _allowed_model(settings: Settings, provider_name: str, model: str) -> str:
    """Clamp *model* to the provider's allowlist; empty allowlist accepts anything."""
    allowed = settings.ai_allowed_models.get(provider_name, [])
    if not allowed or model in allowed:
        return model
    if model:
        logger.warning("Model %r not allowed for %r, using %r", model, provider_name, allowed[0])
    return allowed[0]


def resolve(
    *,
    override_provider: str | None = None,
    override_model: str | None = None,
) -> ResolvedConfig:
    """Caller override (when ``ENABLE_AI_OVERRIDES``), then ``AI_RECEIPT_*`` env, then mock."""
    settings = get_settings()

    provider_name = _override(settings, override_provider).lower() or settings.ai_receipt_provider or "mock"
    model = _override(settings, override_model) or settings.ai_receipt_model

    return ResolvedConfig(
        provider=get_provider(provider_name),
        model=_allowed_model(settings, provider_name, model),
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=settings.ai_receipt_timeout_seconds,
    )
