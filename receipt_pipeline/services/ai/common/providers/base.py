"""Abstract base for all AI providers."""

from __future__ import annotations

import abc
import time
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class BaseProvider(abc.ABC):
    """Contract that every AI provider must implement."""

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* and return a ``ProviderResult``."""


class HTTPChatProvider(BaseProvider):
    """Shared request/timing plumbing for JSON-over-HTTP chat APIs.

    Subclasses describe the endpoint, the auth headers, the request body and
    how to read text + token usage back out of the response.
    """

    url: str = ""
    default_model: str = ""

    def __init__(self, api_key: str, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._transport = transport

    @abc.abstractmethod
    def headers(self) -> dict[str, str]: ...

    @abc.abstractmethod
    def payload(
        self,
        prompt: str,
        *,
        system_prompt: str | None,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> dict[str, Any]: ...

    @abc.abstractmethod
    def parse(self, data: dict[str, Any]) -> tuple[str, int, int]:
        """Return ``(text, prompt_tokens, completion_tokens)``."""

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
        model = model or self.default_model
        t0 = time.monotonic()

        async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
            resp = await client.post(
                self.url,
                headers=self.headers(),
                json=self.payload(
                    prompt,
                    system_prompt=system_prompt,
                    model=model,
                    temperature=temperature,
                    max_tokens=max_tokens,
                ),
            )
            resp.raise_for_status()
            data = resp.json()

        elapsed = (time.monotonic() - t0) * 1000
        text, prompt_tokens, completion_tokens = self.parse(data)

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=round(elapsed, 2),
        )
