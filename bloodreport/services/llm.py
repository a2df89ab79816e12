"""OpenRouter chat-completions client used by the health assistant."""
from __future__ import annotations

from typing import Any, Dict, List

import httpx

from bloodreport import config


class LLMUnavailable(Exception):
    """The model is not configured or returned nothing usable."""


def is_configured() -> bool:
    return bool(config.AI_CHAT_ENABLED and config.OPENROUTER_API_KEY)


async def generate_chat(system: str, messages: List[Dict[str, Any]], timeout_s: int | None = None) -> str:
    if not is_configured():
        raise LLMUnavailable("model not configured")

    payload = {
        "model": config.OPENROUTER_MODEL,
        "messages": [{"role": "system", "content": system}, *messages],
        "temperature": 0.3,
    }
    async with httpx.AsyncClient(timeout=timeout_s or config.LLM_TIMEOUT_SECONDS) as client:
        r = await client.post(
            config.OPENROUTER_URL,
            headers={
                "Authorization": f"Bearer {config.OPENROUTER_API_KEY}",
                "Content-Type": "application/json",
            },
            json=payload,
        )
        r.raise_for_status()
        data = r.json()

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMUnavailable("malformed completion") from exc
    text = content.strip() if isinstance(content, str) else ""
    if not text:
        raise LLMUnavailable("empty completion")
    return text


__all__ = ["LLMUnavailable", "generate_chat", "is_configured"]
