"""
LLM Client - wraps the OpenAI SDK for streamed chat completions.

Streaming: ChatCompletionChunk → content delta strings (empty deltas dropped)

Errors raised by the SDK (APIStatusError, APIConnectionError, ...) are
propagated untouched; callers decide how to classify them.
"""

import logging
from typing import AsyncIterator, Dict, Iterable, List, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


def _translate_messages_for_openai(turns: Iterable) -> List[Dict[str, str]]:
    """Translate conversation turns (objects or dicts) to OpenAI message dicts."""
    translated = []
    for turn in turns:
        if isinstance(turn, dict):
            role = turn.get("role", "user")
            content = turn.get("content", "")
        else:
            role = turn.role
            content = turn.content
        translated.append({"role": role, "content": content})
    return translated


class LLMClient:
    """Wraps AsyncOpenAI for chat completion streaming."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 60.0,
        base_url: Optional[str] = None,
        openai_client: Optional[AsyncOpenAI] = None,
    ):
        """
        Args:
            api_key: OpenAI API key
            timeout: Request timeout in seconds
            base_url: Optional alternate API base URL
            openai_client: Pre-built client (tests)
        """
        self._timeout = timeout
        self._openai = openai_client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def stream_chat(
        self,
        messages: Iterable,
        model: str = "gpt-3.5-turbo",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Stream a chat completion, yielding non-empty content deltas.

        Args:
            messages: Conversation turns, oldest first
            model: Model name
            temperature: Sampling temperature
            max_tokens: Completion token cap

        Yields:
            Content delta strings in arrival order
        """
        kwargs = {
            "model": model,
            "messages": _translate_messages_for_openai(messages),
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        stream = await self._openai.chat.completions.create(stream=True, **kwargs)
        logger.debug(f"OpenAI stream opened (model={model})")

        async for chunk in stream:
            delta = chunk.choices[0].delta if chunk.choices else None
            if not delta:
                continue
            content = delta.content or ""
            if content:
                yield content

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._openai.close()
