"""Payment method detection: first keyword hit in fixed priority order."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

UPI = "UPI"
CARD = "Card"
CASH = "Cash"
BANK_TRANSFER = "Bank Transfer"

PAYMENT_METHODS = (UPI, CARD, CASH, BANK_TRANSFER)

PAYMENT_KEYWORDS: dict[str, tuple[str, ...]] = {
    UPI: ("upi", "gpay", "phonepe", "paytm", "bharatpe"),
    CARD: ("card", "debit", "credit", "visa", "mastercard"),
    CASH: ("cash", "currency"),
    BANK_TRANSFER: ("net banking", "online", "internet banking"),
}

# Virtual payment address handles, e.g. "shop@okhdfcbank" or "98xxxx@ybl".
# A dot after the handle means an email domain ("care@hdfcbank.com").
_UPI_HANDLE = re.compile(
    r"\b[a-z0-9._-]{2,}@(?:ok[a-z]+|ybl|ibl|axl|upi|paytm|apl|yapl|ptsbi|ptyes|pthdfc|ptaxis|axisbank|icici|sbi|hdfcbank)(?!\.?\w)",
    re.IGNORECASE,
)


def classify_payment_method(text: str) -> str | None:
    """Return the first payment method whose keywords appear in *text*."""
    if not text:
        return None
    lowered = text.lower()
    for method in PAYMENT_METHODS:
        if any(keyword in lowered for keyword in PAYMENT_KEYWORDS[method]):
            logger.debug("Payment method %s", method)
            return method
        if method == UPI and _UPI_HANDLE.search(text):
            logger.debug("Payment method %s from UPI handle", method)
            return method
    return None
