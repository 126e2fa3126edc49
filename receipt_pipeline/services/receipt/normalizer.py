"""Map free-text category / payment labels onto the caller's canonical vocabulary.

One module serves both expense and income flows; only the alias tables
differ by context. Resolution per field:

  1. Alias lookup on the lower-cased label. Alias values are ordered
     candidates; the first one present in the canonical list is adopted.
  2. Fuzzy substring match in either direction, first canonical entry wins.
  3. Otherwise the raw label is returned untouched.

Nothing here raises; a label is only ever narrowed or passed through.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Sequence

from receipt_pipeline.schemas.receipt import ExtractionContext, ExtractionResult

from .dates import extract_date
from .payments import BANK_TRANSFER, CARD, CASH, PAYMENT_METHODS, UPI

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

AliasTable = Mapping[str, tuple[str, ...]]

EXPENSE_CATEGORY_ALIASES: AliasTable = {
    "food": ("Food & Dining", "Food"),
    "food & dining": ("Food & Dining", "Food"),
    "dining": ("Food & Dining", "Food"),
    "restaurant": ("Food & Dining", "Food"),
    "cafe": ("Food & Dining", "Food"),
    "groceries": ("Groceries", "Food & Dining", "Food"),
    "grocery": ("Groceries", "Food & Dining", "Food"),
    "transportation": ("Transportation", "Transport"),
    "transport": ("Transportation", "Transport"),
    "fuel": ("Gas", "Transportation", "Transport"),
    "taxi": ("Transportation", "Transport"),
    "shopping": ("Shopping",),
    "bills & utilities": ("Bills & Utilities", "Utilities", "Bills"),
    "bills": ("Bills & Utilities", "Bills", "Utilities"),
    "utilities": ("Bills & Utilities", "Utilities", "Bills"),
    "utility": ("Bills & Utilities", "Utilities", "Bills"),
    "rent": ("Rent", "Housing"),
    "housing": ("Housing", "Rent"),
    "emi": ("EMI",),
    "loan": ("EMI",),
    "healthcare": ("Healthcare",),
    "health": ("Healthcare",),
    "medical": ("Healthcare",),
    "entertainment": ("Entertainment",),
    "education": ("Education",),
    "travel": ("Travel",),
    "investment": ("Investments",),
    "investments": ("Investments",),
    "miscellaneous": ("Miscellaneous", "Other"),
    "misc": ("Miscellaneous", "Other"),
    "financial": ("Financial",),
}

INCOME_CATEGORY_ALIASES: AliasTable = {
    "salary": ("Salary",),
    "wages": ("Salary",),
    "payroll": ("Salary",),
    "salary credit": ("Salary",),
    "bonus": ("Bonus", "Salary"),
    "freelance": ("Freelance",),
    "consulting": ("Freelance", "Business"),
    "contract work": ("Freelance",),
    "business": ("Business",),
    "business income": ("Business",),
    "investment": ("Investments",),
    "investments": ("Investments",),
    "dividend": ("Investments",),
    "interest": ("Investments",),
    "rent": ("Rental Income",),
    "rental": ("Rental Income",),
    "rental income": ("Rental Income",),
    "sales": ("Sales", "Business"),
    "sale": ("Sales", "Business"),
    "gift": ("Other",),
    "refund": ("Other",),
}

PAYMENT_ALIASES: AliasTable = {
    "upi": (UPI,),
    "gpay": (UPI,),
    "phonepe": (UPI,),
    "paytm": (UPI,),
    "wallet": (UPI,),
    "card": (CARD, "debit_card"),
    "debit": (CARD, "debit_card"),
    "credit": (CARD, "credit_card"),
    "debit card": (CARD, "debit_card"),
    "credit card": (CARD, "credit_card"),
    "debit_card": (CARD,),
    "credit_card": (CARD,),
    "cash": (CASH,),
    "bank transfer": (BANK_TRANSFER, "net_banking"),
    "net banking": (BANK_TRANSFER, "net_banking"),
    "net_banking": (BANK_TRANSFER,),
    "netbanking": (BANK_TRANSFER, "net_banking"),
    "neft": (BANK_TRANSFER, "net_banking"),
    "imps": (BANK_TRANSFER, "net_banking"),
    "rtgs": (BANK_TRANSFER, "net_banking"),
    "cheque": (BANK_TRANSFER, "net_banking"),
}

CATEGORY_ALIASES: dict[ExtractionContext, AliasTable] = {
    ExtractionContext.EXPENSE: EXPENSE_CATEGORY_ALIASES,
    ExtractionContext.INCOME: INCOME_CATEGORY_ALIASES,
}


def normalize_label(raw: str | None, canonical: Sequence[str], aliases: AliasTable) -> str | None:
    if raw is None:
        return None
    label = raw.strip()
    if not label or not canonical:
        return raw

    key = label.lower()
    by_lower = {name.lower(): name for name in canonical}

    if key in by_lower:
        return by_lower[key]

    for candidate in aliases.get(key, ()):
        match = by_lower.get(candidate.lower())
        if match is not None:
            logger.debug("Label %r mapped via alias to %r", raw, match)
            return match

    for name in canonical:
        lowered = name.lower()
        if lowered and (key in lowered or lowered in key):
            logger.debug("Label %r fuzzy-matched to %r", raw, name)
            return name

    logger.info("Label %r has no canonical match, passing through", raw)
    return raw


def normalize_category(
    raw: str | None,
    canonical: Sequence[str],
    context: ExtractionContext = ExtractionContext.EXPENSE,
) -> str | None:
    return normalize_label(raw, canonical, CATEGORY_ALIASES[ExtractionContext(context)])


def normalize_payment_method(raw: str | None, canonical: Sequence[str] | None = None) -> str | None:
    return normalize_label(raw, canonical or PAYMENT_METHODS, PAYMENT_ALIASES)


def normalize_date(raw: str | None) -> str | None:
    """Rewrite a date in any receipt format to ``YYYY-MM-DD``; unparseable input passes through."""
    if raw is None or _ISO_DATE.match(raw.strip()):
        return raw
    parsed = extract_date(raw)
    if parsed is None:
        logger.info("Date %r not recognised, passing through", raw)
        return raw
    return parsed


def match_subcategory(description: str | None, subcategories: Iterable[str]) -> str | None:
    """First subcategory whose name contains the description or vice versa."""
    if not description:
        return None
    text = description.lower()
    for name in subcategories:
        lowered = name.lower().strip()
        if lowered and (lowered in text or text in lowered):
            return name
    return None


def normalize_result(
    result: ExtractionResult,
    *,
    context: ExtractionContext = ExtractionContext.EXPENSE,
    canonical_categories: Sequence[str] = (),
    payment_methods: Sequence[str] | None = None,
    subcategories: Sequence[str] | None = None,
) -> ExtractionResult:
    """Return a copy of *result* with labels mapped onto the canonical lists."""
    updates: dict[str, str | None] = {
        "date": normalize_date(result.date),
        "category": normalize_category(result.category, canonical_categories, context),
        "payment_method": normalize_payment_method(result.payment_method, payment_methods),
    }
    if result.subcategory is not None and subcategories:
        updates["subcategory"] = normalize_label(result.subcategory, subcategories, {})
    elif result.subcategory is None and subcategories:
        updates["subcategory"] = match_subcategory(result.description, subcategories)
    return result.model_copy(update=updates)
