"""Thin client for the text-generation backend."""

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI


class TextGenerator(Protocol):
    async def complete(self, prompt: str, max_tokens: int) -> str:
        ...


class OpenAITextGenerator:
    """Chat-completions backend; one request per call, no retries.

    Timeouts belong to the OpenAI client configuration.
    """

    def __init__(self, api_key: Optional[str], model_id: str, base_url: Optional[str] = None):
        self.model_id = model_id
        self.client = AsyncOpenAI(api_key=api_key or "not-configured", base_url=base_url, max_retries=0)

    async def complete(self, prompt: str, max_tokens: int) -> str:
        response = await self.client.chat.completions.create(
            model=self.model_id,
            messages=[{"role": "system", "content": prompt}],
            max_completion_tokens=max_tokens,
        )
        content = response.choices[0].message.content if response.choices else None
        logging.debug(f"Completion received ({len(content or '')} chars)")
        return (content or "").strip()
