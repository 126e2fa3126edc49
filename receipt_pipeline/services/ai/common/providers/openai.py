"""OpenAI provider (chat completions, JSON mode)."""

from __future__ import annotations

from typing import Any

from .base import HTTPChatProvider


class OpenAIProvider(HTTPChatProvider):
    name = "openai"
    url = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-4o-mini-2024-07-18"

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def payload(self, prompt, *, system_prompt, model, temperature, max_tokens) -> dict[str, Any]:
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
            "messages": messages,
        }

    def parse(self, data: dict[str, Any]) -> tuple[str, int, int]:
        text = data["choices"][0]["message"]["content"] or ""
        usage = data.get("usage", {})
        return text, usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0)
