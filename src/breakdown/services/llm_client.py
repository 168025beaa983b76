from __future__ import annotations

"""Model client used by the breakdown pipeline.

Gemini is reached through its OpenAI-compatible endpoint with
``langchain_openai.ChatOpenAI``; callers only depend on ``generate``.
"""

import logging
from typing import Any, Dict, List, Protocol

from langchain_openai import ChatOpenAI

from ..config import Settings


LOG = logging.getLogger("breakdown.llm")


class ModelClient(Protocol):
    model: str

    async def generate(self, prompt: str) -> str:
        ...


def _content_text(res: Any) -> str:
    content = res.content if hasattr(res, "content") else res
    if isinstance(content, list):
        # Multi-part replies: keep the text parts in order
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return content if isinstance(content, str) else str(content)


class ChatModelClient:
    """Single-shot prompt -> text client. No streaming, no retries."""

    def __init__(self, settings: Settings) -> None:
        self.model = settings.model
        self.base_url = settings.base_url
        kwargs: Dict[str, Any] = {
            "api_key": settings.api_key,
            "base_url": settings.base_url,
            "model": settings.model,
            "max_retries": 0,
        }
        if settings.temperature is not None:
            kwargs["temperature"] = settings.temperature
        if settings.timeout is not None:
            kwargs["timeout"] = settings.timeout
        self._llm = ChatOpenAI(**kwargs)

    async def generate(self, prompt: str) -> str:
        LOG.debug("llm_invoke model=%s prompt_chars=%d", self.model, len(prompt))
        res = await self._llm.ainvoke([{"role": "user", "content": prompt}])
        text = _content_text(res)
        LOG.debug("llm_reply model=%s reply_chars=%d", self.model, len(text))
        return text


def build_model_client(settings: Settings) -> ChatModelClient:
    LOG.info("Using remote LLM provider model=%s base_url=%s", settings.model, settings.base_url)
    return ChatModelClient(settings)
