"""AI-first receipt extraction with a deterministic heuristic fallback.

State machine::

    AI_ATTEMPT --success--------------------------> DONE
    AI_ATTEMPT --failure/timeout/absent--> HEURISTIC_FALLBACK --> DONE

The AI call is attempted at most once. Its result is adopted whole or not
at all; heuristic fields are never merged into an AI result.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Sequence

from receipt_pipeline.core.config import get_settings
from receipt_pipeline.schemas.receipt import (
    AIExtractRequest,
    AIExtractResponse,
    ExtractionContext,
    ExtractionOutcome,
    ExtractionResult,
    ExtractionSource,
)
from receipt_pipeline.services.ai.receipt_extract.contracts import AIReceiptExtractor
from receipt_pipeline.services.ai.receipt_extract.service import build_ai_extractor

from .heuristic import parse_receipt_text
from .normalizer import normalize_result

logger = logging.getLogger(__name__)


class ExtractionState(StrEnum):
    AI_ATTEMPT = "ai_attempt"
    HEURISTIC_FALLBACK = "heuristic_fallback"
    DONE = "done"


def next_state(state: ExtractionState, ai_succeeded: bool) -> ExtractionState:
    if state == ExtractionState.AI_ATTEMPT:
        return ExtractionState.DONE if ai_succeeded else ExtractionState.HEURISTIC_FALLBACK
    return ExtractionState.DONE


class ReceiptExtractionOrchestrator:
    def __init__(
        self,
        extractor: AIReceiptExtractor | None = None,
        *,
        timeout_seconds: float = 15.0,
    ) -> None:
        self._extractor = extractor
        self._timeout_seconds = timeout_seconds

    async def _attempt_ai(self, request: AIExtractRequest) -> tuple[ExtractionResult | None, str | None]:
        """Return ``(result, error)``; exactly one of them is set."""
        if self._extractor is None:
            return None, "ai_not_configured"

        try:
            response = await asyncio.wait_for(
                self._extractor.extract(request),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "AI extraction via %s timed out after %.1fs",
                self._extractor.name,
                self._timeout_seconds,
            )
            return None, "timeout"
        except Exception as exc:
            logger.warning("AI extraction via %s failed: %s", self._extractor.name, exc)
            return None, f"{type(exc).__name__}: {exc}"

        if not isinstance(response, AIExtractResponse):
            logger.warning("AI extractor %s returned %r", self._extractor.name, type(response))
            return None, "malformed_response"
        if not response.success or response.data is None:
            error = response.error or "no_data"
            logger.warning("AI extraction via %s reported failure: %s", self._extractor.name, error)
            return None, error
        return response.data, None

    async def extract(
        self,
        raw_text: str | None,
        *,
        context: ExtractionContext = ExtractionContext.EXPENSE,
        canonical_categories: Sequence[str] = (),
        user_id: str = "",
        payment_methods: Sequence[str] | None = None,
        subcategories: Sequence[str] | None = None,
    ) -> ExtractionOutcome:
        context = ExtractionContext(context)

        if not raw_text or not raw_text.strip():
            logger.info("No receipt text supplied, returning empty result")
            return ExtractionOutcome(result=ExtractionResult(), source=ExtractionSource.NONE)

        state = ExtractionState.AI_ATTEMPT
        request = AIExtractRequest(
            raw_text=raw_text,
            context=context,
            canonical_categories=list(canonical_categories),
            user_id=user_id,
        )
        result, ai_error = await self._attempt_ai(request)
        state = next_state(state, ai_succeeded=result is not None)

        source = ExtractionSource.AI
        if state == ExtractionState.HEURISTIC_FALLBACK:
            result = parse_receipt_text(raw_text)
            source = ExtractionSource.HEURISTIC
            state = next_state(state, ai_succeeded=False)

        normalized = normalize_result(
            result,
            context=context,
            canonical_categories=canonical_categories,
            payment_methods=payment_methods,
            subcategories=subcategories,
        )
        logger.info("Receipt extracted via %s (ai_error=%s)", source, ai_error)
        return ExtractionOutcome(
            result=normalized,
            source=source,
            ai_error=ai_error if source == ExtractionSource.HEURISTIC else None,
        )


async def extract_receipt(
    raw_text: str | None,
    *,
    context: ExtractionContext = ExtractionContext.EXPENSE,
    canonical_categories: Sequence[str] = (),
    user_id: str = "",
    payment_methods: Sequence[str] | None = None,
    subcategories: Sequence[str] | None = None,
) -> ExtractionOutcome:
    """Run the pipeline with the AI extractor configured in settings."""
    settings = get_settings()
    orchestrator = ReceiptExtractionOrchestrator(
        build_ai_extractor(),
        timeout_seconds=settings.ai_receipt_timeout_seconds,
    )
    return await orchestrator.extract(
        raw_text,
        context=context,
        canonical_categories=canonical_categories,
        user_id=user_id,
        payment_methods=payment_methods,
        subcategories=subcategories,
    )
