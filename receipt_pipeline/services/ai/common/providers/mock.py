"""Mock provider: deterministic responses for tests and fallback."""

from __future__ import annotations

import time

from .base import BaseProvider, ProviderResult

DEFAULT_MOCK_REPLY = (
    '{"amount": null, "date": null, "category": null, "subcategory": null, '
    '"paymentMethod": null, "description": null, "confidence": 0.0}'
)


class MockProvider(BaseProvider):
    name = "mock"

    def __init__(self, reply: str = DEFAULT_MOCK_REPLY) -> None:
        self._reply = reply

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        model: str = "",
        temperature: float = 0.1,
        max_tokens: int = 512,
        timeout_seconds: float = 15.0,
    ) -> ProviderResult:
        t0 = time.monotonic()
        text = self._reply
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model=model or "mock-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
