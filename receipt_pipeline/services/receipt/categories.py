"""Keyword-weighted category classification for receipt text."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

KEYWORD_SCORE = 1.0
WORD_BOUNDARY_BONUS = 0.5
MERCHANT_BONUS = 3.0

EDUCATION = "Education"
EDUCATION_CONFIRMING_TERMS = ("school", "college", "university", "tuition", "academy")

# Registration order is the tie-break order.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Food & Dining": (
        "restaurant", "cafe", "coffee", "food", "meal", "lunch", "dinner", "breakfast",
        "pizza", "burger", "sandwich", "juice", "tea", "snacks", "dining", "kitchen",
        "hotel", "bar", "pub", "bakery", "confectionery", "groceries", "vegetables",
        "fruits", "milk", "bread", "rice", "wheat", "flour", "spices", "oil",
        "croissant", "corner", "hamburger", "fries", "soda", "drink",
    ),
    "Transportation": (
        "taxi", "uber", "ola", "bus", "metro", "train", "flight", "airport",
        "fuel", "petrol", "diesel", "gas", "parking", "toll", "fare", "ticket",
        "auto", "rickshaw", "cab", "vehicle", "car", "bike", "motorcycle",
    ),
    "Shopping": (
        "store", "shop", "mall", "market", "supermarket", "department", "retail",
        "clothes", "clothing", "shoes", "electronics", "mobile", "laptop", "computer",
        "furniture", "appliances", "cosmetics", "jewelry", "watch", "bag", "accessories",
        "utensil", "forks", "spoons", "knives", "spatula", "cookware", "kitchen",
        "tools", "hardware", "emporium",
    ),
    "Bills & Utilities": (
        "electricity", "water", "internet", "phone", "mobile", "broadband", "cable",
        "rent", "maintenance", "society", "gas", "cylinder", "insurance", "premium",
        "subscription", "recharge", "bill", "utility", "connection",
    ),
    "Healthcare": (
        "hospital", "clinic", "doctor", "medical", "pharmacy", "medicine", "drug",
        "health", "fitness", "gym", "yoga", "therapy", "treatment", "consultation",
    ),
    "Entertainment": (
        "movie", "theater", "cinema", "game", "concert", "ticket", "entertainment",
        "music", "book", "magazine", "subscription", "streaming", "netflix", "prime",
    ),
    EDUCATION: (
        "school", "college", "university", "tuition", "fees", "course", "training",
        "education", "academy", "institute", "learning",
    ),
    "Travel": (
        "hotel", "booking", "travel", "trip", "vacation", "holiday", "resort",
        "flight", "train", "bus", "accommodation", "tour", "package",
    ),
}

# Matched only against the first line (the merchant name).
MERCHANT_PATTERNS: dict[str, tuple[str, ...]] = {
    "Food & Dining": (
        "cafe", "restaurant", "coffee", "bakery", "kitchen", "dining", "food", "meal",
        "corner", "pizza", "burger", "fast food",
    ),
    "Shopping": (
        "store", "shop", "mall", "market", "supermarket", "retail", "emporium",
        "utensil", "tools", "hardware",
    ),
    "Healthcare": ("hospital", "clinic", "pharmacy", "medical", "doctor"),
    EDUCATION: ("school", "college", "university", "tuition", "education", "academy", "institute"),
    "Transportation": ("taxi", "uber", "bus", "metro", "train", "airport"),
    "Entertainment": ("cinema", "theater", "movie", "game", "entertainment"),
    "Housing": ("hotel", "booking", "travel", "accommodation"),
    "Utilities": ("bill", "utility", "electricity", "water", "internet", "phone"),
}


def merchant_line(text: str) -> str | None:
    """First non-empty line, taken as the probable merchant name."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


def score_categories(
    text: str,
    keywords: dict[str, tuple[str, ...]] = CATEGORY_KEYWORDS,
    merchant_patterns: dict[str, tuple[str, ...]] = MERCHANT_PATTERNS,
) -> dict[str, float]:
    """Score every category with at least one hit.

    Insertion order of the returned dict follows the keyword table, then any
    merchant-only categories in merchant-table order.
    """
    lowered = text.lower()
    scores: dict[str, float] = {}

    for category, words in keywords.items():
        score = 0.0
        for word in words:
            if word in lowered:
                score += KEYWORD_SCORE
                if f"{word} " in lowered:
                    score += WORD_BOUNDARY_BONUS
        if score > 0:
            scores[category] = score

    merchant = merchant_line(text)
    if merchant:
        merchant = merchant.lower()
        for category, patterns in merchant_patterns.items():
            for pattern in patterns:
                if pattern in merchant:
                    scores[category] = scores.get(category, 0.0) + MERCHANT_BONUS
                    logger.debug("Merchant pattern %r in %r -> %s", pattern, merchant, category)

    return scores


def _best(scores: dict[str, float]) -> str | None:
    # max() keeps the first of equal scores, i.e. registration order.
    if not scores:
        return None
    return max(scores, key=lambda category: scores[category])


def classify_category(text: str) -> str | None:
    """Return the best category label for *text*, or ``None``."""
    if not text:
        return None

    scores = score_categories(text)
    best = _best(scores)

    if best == EDUCATION:
        lowered = text.lower()
        if not any(term in lowered for term in EDUCATION_CONFIRMING_TERMS):
            logger.debug("Education not corroborated, re-resolving from %s", scores)
            scores.pop(EDUCATION)
            best = _best(scores)

    if best is not None:
        logger.debug("Category %s (score %.1f)", best, scores[best])
    return best
