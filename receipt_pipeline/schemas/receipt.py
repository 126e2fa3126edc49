from decimal import Decimal
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DESCRIPTION_MAX_CHARS = 150


class ExtractionContext(StrEnum):
    EXPENSE = "expense"
    INCOME = "income"


class ExtractionSource(StrEnum):
    AI = "ai"
    HEURISTIC = "heuristic"
    NONE = "none"


class ExtractionResult(BaseModel):
    """Structured transaction fields recovered from one receipt.

    Every field is optional. ``confidence`` is only ever set by the AI path.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, serialize_by_alias=True)

    amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    description: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @field_validator("date", "category", "subcategory", "payment_method", "description", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("description")
    @classmethod
    def _truncate_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip()[:DESCRIPTION_MAX_CHARS]

    def is_empty(self) -> bool:
        return all(
            getattr(self, name) is None
            for name in ("amount", "date", "category", "subcategory", "payment_method", "description")
        )


class AIExtractRequest(BaseModel):
    """Payload sent to the structured AI extractor."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    raw_text: str = Field(alias="rawText")
    context: ExtractionContext = ExtractionContext.EXPENSE
    canonical_categories: list[str] = Field(default_factory=list, alias="canonicalCategories")
    user_id: str = Field(default="", alias="userId")


class AIExtractResponse(BaseModel):
    """Reply from the structured AI extractor."""

    success: bool = False
    data: Optional[ExtractionResult] = None
    error: Optional[str] = None


class ExtractionOutcome(BaseModel):
    """Final pipeline output plus which path produced it."""

    model_config = ConfigDict(frozen=True)

    result: ExtractionResult
    source: ExtractionSource
    ai_error: Optional[str] = None
