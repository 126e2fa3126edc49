"""Structured AI receipt extraction.

Two interchangeable backends implement ``AIReceiptExtractor``:

* ``ProviderReceiptExtractor`` prompts an LLM provider resolved by the AI
  router and parses its JSON reply.
* ``RemoteReceiptExtractor`` posts the request to the OCR analysis backend,
  which already speaks the ``{success, data, error}`` contract.

Neither retries; timeouts and fallback are the orchestrator's job.
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from receipt_pipeline.core.config import get_settings
from receipt_pipeline.schemas.receipt import (
    AIExtractRequest,
    AIExtractResponse,
    ExtractionContext,
    ExtractionResult,
)
from receipt_pipeline.services.ai.common import router as ai_router
from receipt_pipeline.services.ai.common.audit import log_ai_run
from receipt_pipeline.services.ai.common.json_tools import extract_json
from receipt_pipeline.services.ai.common.providers.base import BaseProvider

from .contracts import REMOTE_ENDPOINTS, AIReceiptExtractor

logger = logging.getLogger(__name__)

RECEIPT_SYSTEM_PROMPT = (
    "You extract transaction data from OCR text of Indian receipts and income documents. "
    "Return ONLY a JSON object, no markdown or explanation, with keys: "
    "amount (number, the final total paid), date (YYYY-MM-DD), category, subcategory, "
    "paymentMethod (one of UPI, Card, Cash, Bank Transfer), description (max 150 chars), "
    "confidence (0.0-1.0). Use null for anything you cannot determine."
)

RECEIPT_USER_PROMPT = """Document type: {context}
Choose category from: {categories}

OCR text:
\"\"\"
{content}
\"\"\""""

_RESULT_KEYS = ("amount", "date", "category", "subcategory", "paymentMethod", "description", "confidence")


def build_prompt(request: AIExtractRequest, max_chars: int) -> str:
    categories = ", ".join(request.canonical_categories) or "any sensible category"
    return RECEIPT_USER_PROMPT.format(
        context=request.context.value,
        categories=categories,
        content=request.raw_text[:max_chars],
    )


def _coerce_payload(parsed: dict) -> dict:
    """Keep known keys and accept snake_case ``payment_method`` too."""
    payload = {key: parsed.get(key) for key in _RESULT_KEYS if key in parsed}
    if "paymentMethod" not in payload and "payment_method" in parsed:
        payload["paymentMethod"] = parsed["payment_method"]
    confidence = payload.get("confidence")
    if isinstance(confidence, (int, float)):
        payload["confidence"] = max(0.0, min(1.0, float(confidence)))
    return payload


class ProviderReceiptExtractor:
    name = "provider"

    def __init__(
        self,
        provider: BaseProvider | None = None,
        *,
        model: str = "",
        override_provider: str | None = None,
        override_model: str | None = None,
    ) -> None:
        self._provider = provider
        self._model = model
        self._override_provider = override_provider
        self._override_model = override_model

    async def extract(self, request: AIExtractRequest) -> AIExtractResponse:
        settings = get_settings()
        config = ai_router.resolve(
            override_provider=self._override_provider,
            override_model=self._override_model,
        )
        provider = self._provider or config.provider
        model = self._model or config.model

        prompt = build_prompt(request, settings.receipt_max_input_chars)

        result = await provider.generate(
            prompt,
            system_prompt=RECEIPT_SYSTEM_PROMPT,
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout_seconds=config.timeout_seconds,
        )

        parsed = extract_json(result.raw_text)
        if parsed is None:
            logger.warning("AI returned non-JSON response: %s", result.raw_text[:200])
            return AIExtractResponse(success=False, error="invalid_json")

        try:
            data = ExtractionResult.model_validate(_coerce_payload(parsed))
        except ValidationError as exc:
            logger.warning("AI reply failed validation: %s", exc.errors()[:3])
            return AIExtractResponse(success=False, error="invalid_fields")

        log_ai_run(
            provider_result=result,
            prompt_text=prompt,
            parsed_output=data.model_dump(),
            actor_id=request.user_id or None,
            extra_meta={"context": request.context.value},
        )

        if data.is_empty():
            return AIExtractResponse(success=False, error="empty_extraction")
        return AIExtractResponse(success=True, data=data)


class RemoteReceiptExtractor:
    name = "remote"

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def extract(self, request: AIExtractRequest) -> AIExtractResponse:
        endpoint = REMOTE_ENDPOINTS[ExtractionContext(request.context).value]
        body = {
            "extractedText": request.raw_text,
            "userId": request.user_id,
            "context": request.context.value,
            "availableCategories": request.canonical_categories,
        }

        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            transport=self._transport,
        ) as client:
            resp = await client.post(endpoint, json=body)
            resp.raise_for_status()
            try:
                payload = resp.json()
            except json.JSONDecodeError:
                return AIExtractResponse(success=False, error="invalid_json")

        if not isinstance(payload, dict):
            return AIExtractResponse(success=False, error="invalid_json")
        if isinstance(payload.get("data"), dict):
            payload = {**payload, "data": _coerce_payload(payload["data"])}
        return AIExtractResponse.model_validate(payload)


def build_ai_extractor() -> AIReceiptExtractor | None:
    """Extractor configured by settings, or ``None`` when AI is disabled."""
    settings = get_settings()
    if not settings.enable_ai_receipt_extraction:
        return None
    if settings.ai_receipt_backend == "remote":
        if not settings.receipt_ai_backend_url:
            logger.warning("RECEIPT_AI_BACKEND_URL not set – AI extraction disabled")
            return None
        return RemoteReceiptExtractor(
            settings.receipt_ai_backend_url,
            timeout_seconds=settings.ai_receipt_timeout_seconds,
        )
    return ProviderReceiptExtractor()
