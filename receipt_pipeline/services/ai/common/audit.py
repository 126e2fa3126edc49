"""AI audit: one structured log record per AI extraction run."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from receipt_pipeline.core.config import get_settings

from .providers.base import ProviderResult

logger = logging.getLogger(__name__)

AUDIT_ACTION = "AI_RECEIPT_EXTRACT"


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()


def log_ai_run(
    *,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    actor_id: str | None = None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Emit an audit record for one provider call and return its payload.

    Receipt text can hold card fragments and UPI handles, so the prompt and
    response are always hashed; raw text is only included when
    ``AI_DEBUG_STORE_RAW=true``.
    """
    settings = get_settings()

    metadata: dict[str, Any] = {
        "action": AUDIT_ACTION,
        "actor_id": actor_id,
        "provider": provider_result.provider,
        "model": provider_result.model,
        "prompt_tokens": provider_result.prompt_tokens,
        "completion_tokens": provider_result.completion_tokens,
        "latency_ms": provider_result.latency_ms,
        "prompt_hash": _sha256(prompt_text),
        "response_hash": _sha256(provider_result.raw_text),
        "parsed_fields": sorted(k for k, v in (parsed_output or {}).items() if v not in (None, "")),
    }

    if settings.ai_debug_store_raw:
        metadata["prompt_raw"] = prompt_text
        metadata["response_raw"] = provider_result.raw_text

    if extra_meta:
        metadata.update(extra_meta)

    logger.info("%s %s", AUDIT_ACTION, metadata, extra={"ai_audit": metadata})
    return metadata
