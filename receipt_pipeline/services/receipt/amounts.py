"""Receipt total detection: ordered pattern classes, first match wins."""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

_CURRENCY = r"(?:₹|(?<![a-z])Rs\.?|(?<![a-z])INR\.?)"
_NUMBER = r"(\d{1,3}(?:,\d{2,3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
_SEP = r"\s*:?\s*"
# "Sub Total" and "Sub-Total" are subtotals, never the payable total.
_TOTAL = r"(?<!sub)(?<!sub\s)(?<!sub-)\btotal\b"


def _labelled(label: str) -> re.Pattern[str]:
    """Label followed by an amount with the currency before or after it."""
    return re.compile(
        rf"{label}{_SEP}(?:{_CURRENCY}\s*{_NUMBER}|{_NUMBER}\s*{_CURRENCY})",
        re.IGNORECASE,
    )


# Highest priority first. A lower class never overrides a higher one.
AMOUNT_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("total", _labelled(_TOTAL)),
    ("amount_due", _labelled(r"\b(?:amount\s+to\s+pay|amount\s+due|payable|due)\b")),
    ("grand_total", _labelled(r"\b(?:grand|net)\s+total\b")),
    ("final_amount", _labelled(r"\bfinal\s+(?:amount|total)\b")),
]

GENERIC_CURRENCY_PATTERN = re.compile(
    rf"{_CURRENCY}\s*{_NUMBER}|{_NUMBER}\s*{_CURRENCY}",
    re.IGNORECASE,
)

_SUBTOTAL_PATTERN = _labelled(r"\bsub\s*-?\s*total\b")
_TAX_PATTERN = _labelled(r"\btax\b(?:\s*\([^)]*\))?")
_PLAIN_TOTAL_PATTERN = re.compile(rf"{_TOTAL}{_SEP}{_NUMBER}", re.IGNORECASE)


def _to_decimal(raw: str | None) -> Decimal | None:
    if not raw:
        return None
    try:
        value = Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None
    if value < 0 or not value.is_finite():
        return None
    return value


def _first_amount(pattern: re.Pattern[str], text: str) -> Decimal | None:
    for match in pattern.finditer(text):
        number = next((g for g in match.groups() if g), None)
        value = _to_decimal(number)
        if value is not None:
            return value
    return None


def _derived_total(text: str) -> Decimal | None:
    subtotal = _first_amount(_SUBTOTAL_PATTERN, text)
    if subtotal is None:
        return None
    tax = _first_amount(_TAX_PATTERN, text)
    if tax is None:
        return None
    return subtotal + tax


def extract_amount(text: str) -> Decimal | None:
    """Return the most likely transaction total in *text*, or ``None``.

    Resolution order:
      1. Labelled totals (``AMOUNT_PATTERNS``), in priority order.
      2. Subtotal + tax, when both are present.
      3. A bare ``TOTAL <number>`` without currency.
      4. Any currency-marked number.
    """
    if not text:
        return None

    for name, pattern in AMOUNT_PATTERNS:
        value = _first_amount(pattern, text)
        if value is not None:
            logger.debug("Amount %s matched pattern class %r", value, name)
            return value

    value = _derived_total(text)
    if value is not None:
        logger.debug("Amount %s derived from subtotal + tax", value)
        return value

    value = _first_amount(_PLAIN_TOTAL_PATTERN, text)
    if value is not None:
        logger.debug("Amount %s matched bare TOTAL", value)
        return value

    value = _first_amount(GENERIC_CURRENCY_PATTERN, text)
    if value is not None:
        logger.debug("Amount %s matched generic currency pattern", value)
    return value
