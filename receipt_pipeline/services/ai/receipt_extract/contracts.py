"""Receipt extract scope contracts."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from receipt_pipeline.schemas.receipt import AIExtractRequest, AIExtractResponse

REMOTE_ENDPOINTS = {
    "expense": "/api/ocr/analyze-receipt",
    "income": "/api/ocr/analyze-income-document",
}


@runtime_checkable
class AIReceiptExtractor(Protocol):
    """Anything that can turn raw receipt text into a structured reply.

    Implementations may raise on transport errors; the orchestrator treats
    any exception as an AI failure.
    """

    name: str

    async def extract(self, request: AIExtractRequest) -> AIExtractResponse: ...
