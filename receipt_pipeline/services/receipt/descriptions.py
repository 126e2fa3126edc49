"""Pick human-readable receipt lines for the transaction description."""

from __future__ import annotations

import re

from receipt_pipeline.schemas.receipt import DESCRIPTION_MAX_CHARS

from .dates import extract_date
from .payments import PAYMENT_KEYWORDS

EXCLUDED_TERMS = ("total", "subtotal", "tax", "receipt")
MAX_LINES = 3
MIN_LINE_LENGTH = 4

_PAYMENT_WORDS = frozenset(word for words in PAYMENT_KEYWORDS.values() for word in words)
_LETTER = re.compile(r"[^\W\d_]")


def _is_field_line(line: str) -> bool:
    """True for lines that only repeat another field (a date, a number, a tender)."""
    if not _LETTER.search(line):
        return True
    if line.lower().strip(" .:-") in _PAYMENT_WORDS:
        return True
    date = extract_date(line)
    return date is not None and len(line) <= 20


def extract_description(text: str) -> str | None:
    if not text:
        return None
    kept: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if len(line) < MIN_LINE_LENGTH:
            continue
        lowered = line.lower()
        if any(term in lowered for term in EXCLUDED_TERMS):
            continue
        if _is_field_line(line):
            continue
        kept.append(line)
        if len(kept) == MAX_LINES:
            break
    if not kept:
        return None
    return ", ".join(kept)[:DESCRIPTION_MAX_CHARS]
