"""Anthropic Messages API adapter.

Implements both QueryGeneratorPort and ResponseFormatterPort. The client is
created with retries disabled: a provider failure ends the request.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import anthropic

from adapters.prompts import FORMAT_SYSTEM_PROMPT, QUERY_SYSTEM_PROMPT
from core.errors import LLMError

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-latest"


class AnthropicLLM:
    """Generates catalog queries and formats catalog payloads with Claude."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = DEFAULT_MODEL,
        query_system_prompt: str = QUERY_SYSTEM_PROMPT,
        format_system_prompt: str = FORMAT_SYSTEM_PROMPT,
        query_max_tokens: int = 1500,
        format_max_tokens: int = 2048,
        client: Any = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise RuntimeError("ANTHROPIC_API_KEY is required")
            client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self._client = client
        self._model = model
        self._query_system_prompt = query_system_prompt
        self._format_system_prompt = format_system_prompt
        self._query_max_tokens = query_max_tokens
        self._format_max_tokens = format_max_tokens

    async def generate_query(self, text: str) -> str:
        """Return the GraphQL query for a user message."""

        LOGGER.info("Calling Anthropic API for query generation")
        reply = await self._complete(self._query_system_prompt, text, self._query_max_tokens)
        return reply.strip()

    async def format_response(self, text: str, data: Any) -> str:
        """Return a chat-ready rendering of the catalog data."""

        content = (
            f'User asked: "{text}"\n\n'
            f"Catalog data:\n{json.dumps(data, indent=2, ensure_ascii=False)}\n\n"
            "Format this for chat."
        )
        return await self._complete(self._format_system_prompt, content, self._format_max_tokens)

    async def _complete(self, system: str, content: str, max_tokens: int) -> str:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            raise LLMError(f"Anthropic API error: {e}") from e

        for block in response.content:
            if getattr(block, "type", None) == "text":
                return block.text
        raise LLMError("Anthropic response contained no text")
