"""Tolerant JSON object extraction from LLM replies."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _strip_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    s = text.strip()
    if not s.startswith("```"):
        return s
    s = s.split("\n", 1)[-1] if "\n" in s else s[3:]
    if s.rstrip().endswith("```"):
        s = s.rstrip()[:-3]
    return s.strip()


def extract_json(text: str | None) -> dict[str, Any] | None:
    """Return the first JSON object found in *text*, or ``None``.

    Tries the whole (fence-stripped) reply first, then scans for a
    brace-balanced ``{...}`` candidate. Arrays and scalars are rejected:
    every receipt reply is expected to be an object.
    """
    if not text or not text.strip():
        return None

    stripped = _strip_fences(text)

    try:
        parsed = json.loads(stripped)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    start = stripped.find("{")
    while start != -1:
        candidate = _balanced_object(stripped, start)
        if candidate is not None:
            return candidate
        start = stripped.find("{", start + 1)

    logger.debug("No JSON object in reply: %s", stripped[:200])
    return None


def _balanced_object(text: str, start: int) -> dict[str, Any] | None:
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = in_string
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(text[start : i + 1])
                except ValueError:
                    return None
                return parsed if isinstance(parsed, dict) else None

    return None
