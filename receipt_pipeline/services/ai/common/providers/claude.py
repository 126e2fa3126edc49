"""Anthropic / Claude provider."""

from __future__ import annotations

from typing import Any

from .base import HTTPChatProvider


class ClaudeProvider(HTTPChatProvider):
    name = "claude"
    url = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-5-haiku-20241022"

    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

    def payload(self, prompt, *, system_prompt, model, temperature, max_tokens) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            body["system"] = system_prompt
        return body

    def parse(self, data: dict[str, Any]) -> tuple[str, int, int]:
        text = "".join(block.get("text", "") for block in data.get("content", []) if block.get("type", "text") == "text")
        usage = data.get("usage", {})
        return text, usage.get("input_tokens", 0), usage.get("output_tokens", 0)
