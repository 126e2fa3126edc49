"""Receipt extraction endpoint."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from receipt_pipeline.core.config import get_settings
from receipt_pipeline.schemas.receipt import ExtractionContext, ExtractionSource

router = APIRouter()


def _ensure_receipt_extraction_enabled() -> None:
    settings = get_settings()
    if not settings.enable_receipt_extraction:
        raise HTTPException(404, "Not found")


class ReceiptExtractRequest(BaseModel):
    raw_text: str = Field(default="", max_length=20000)
    context: ExtractionContext = ExtractionContext.EXPENSE
    canonical_categories: list[str] = Field(default_factory=list)
    payment_methods: list[str] | None = None
    subcategories: list[str] | None = None
    user_id: str = ""


class ReceiptExtractResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    amount: Decimal | None = None
    date: str | None = None
    category: str | None = None
    subcategory: str | None = None
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    description: str | None = None
    confidence: float | None = None
    source: ExtractionSource
    ai_error: str | None = None


@router.post(
    "/receipts/extract",
    response_model=ReceiptExtractResponse,
    summary="Extract transaction fields from OCR receipt text",
)
async def extract_receipt_endpoint(body: ReceiptExtractRequest):
    _ensure_receipt_extraction_enabled()

    from receipt_pipeline.services.receipt.orchestrator import extract_receipt

    outcome = await extract_receipt(
        body.raw_text,
        context=body.context,
        canonical_categories=body.canonical_categories,
        user_id=body.user_id,
        payment_methods=body.payment_methods,
        subcategories=body.subcategories,
    )
    result = outcome.result

    return ReceiptExtractResponse(
        amount=result.amount,
        date=result.date,
        category=result.category,
        subcategory=result.subcategory,
        payment_method=result.payment_method,
        description=result.description,
        confidence=result.confidence,
        source=outcome.source,
        ai_error=outcome.ai_error,
    )
