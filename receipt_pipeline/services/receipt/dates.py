"""Receipt date detection and ISO normalization."""

from __future__ import annotations

import logging
import re
from typing import Callable

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_DAY_MONTH_YEAR = re.compile(r"(?<!\d)(\d{1,2})[-/](\d{1,2})[-/](\d{4}|\d{2})(?!\d)")
_YEAR_MONTH_DAY = re.compile(r"(?<!\d)(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?!\d)")
_DAY_MONTHNAME_YEAR = re.compile(
    r"\b(\d{1,2})\s+(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?,?\s+(\d{4})\b",
    re.IGNORECASE,
)


def _format(year: str, month: str | int, day: str) -> str:
    # 2-digit years are always 20YY. Day/month are not range-checked.
    if len(year) == 2:
        year = f"20{year}"
    return f"{year}-{int(month):02d}-{int(day):02d}"


def _from_dmy(match: re.Match[str]) -> str:
    day, month, year = match.groups()
    return _format(year, month, day)


def _from_ymd(match: re.Match[str]) -> str:
    year, month, day = match.groups()
    return _format(year, month, day)


def _from_named_month(match: re.Match[str]) -> str:
    day, month_name, year = match.groups()
    return _format(year, MONTHS[month_name[:3].lower()], day)


DATE_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], str]]] = [
    (_DAY_MONTH_YEAR, _from_dmy),
    (_YEAR_MONTH_DAY, _from_ymd),
    (_DAY_MONTHNAME_YEAR, _from_named_month),
]


def extract_date(text: str) -> str | None:
    """Return the first recognizable date in *text* as ``YYYY-MM-DD``."""
    if not text:
        return None
    for pattern, handler in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            value = handler(match)
            logger.debug("Date %s matched %r", value, match.group(0))
            return value
    return None
