"""Deterministic receipt parser used when the AI path is unavailable."""

from __future__ import annotations

import logging

from receipt_pipeline.schemas.receipt import ExtractionResult

from .amounts import extract_amount
from .categories import classify_category
from .dates import extract_date
from .descriptions import extract_description
from .payments import classify_payment_method

logger = logging.getLogger(__name__)


def parse_receipt_text(text: str | None) -> ExtractionResult:
    """Run every field extractor over *text*. Never raises, never sets confidence."""
    if not text or not text.strip():
        return ExtractionResult()

    result = ExtractionResult(
        amount=extract_amount(text),
        date=extract_date(text),
        category=classify_category(text),
        payment_method=classify_payment_method(text),
        description=extract_description(text),
    )
    logger.info(
        "Heuristic parse: amount=%s date=%s category=%s payment=%s",
        result.amount,
        result.date,
        result.category,
        result.payment_method,
    )
    return result
