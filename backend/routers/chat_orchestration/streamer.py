"""
Response streamers.

Two interchangeable strategies behind one interface:

    final_text = await streamer.stream(conversation, on_chunk)

``on_chunk(chunk, accumulated, is_complete=False)`` is awaited once per
increment, before the next increment is requested, so accumulated content
only ever grows by extension.

- OpenAIStreamer: real model output via the OpenAI streaming API
- MockStreamer: deterministic canned replies paced word by word

build_streamer() picks one from configuration at startup.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Protocol, Sequence

from errors import ModelError
from logging_config import log_llm
from routers.chat_streaming import word_chunks
from services.llm_client import LLMClient

from .session import ChatTurn

logger = logging.getLogger(__name__)

ChunkCallback = Callable[..., Awaitable[None]]

MOCK_GREETING = "Hello! This is a mock response. Your API is working correctly! How can I help you today?"
MOCK_TEST = (
    "This is a test response. Your streaming API, Pusher integration, "
    "and error handling are all functioning properly."
)
MOCK_STATUS = "I'm doing well, thank you! This is a simulated response while you're in development mode."


class ResponseStreamer(Protocol):
    name: str

    async def stream(self, conversation: Sequence[ChatTurn], on_chunk: ChunkCallback) -> str:
        ...


def _latest_user_message(conversation: Sequence[ChatTurn]) -> str:
    for turn in reversed(conversation):
        if turn.role == "user":
            return turn.content
    return ""


class OpenAIStreamer:
    """Streams the model's reply to the whole conversation."""

    name = "openai"

    def __init__(self, client: LLMClient, model: str, temperature: float = 0.7, max_tokens: int = 1000):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def stream(self, conversation: Sequence[ChatTurn], on_chunk: ChunkCallback) -> str:
        """Raises ModelError wrapping the SDK exception on any upstream failure."""
        content = ""
        start_time = time.time()
        log_llm(logger, "start", model=self.model)

        try:
            async for delta in self.client.stream_chat(
                list(conversation),
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            ):
                content += delta
                await on_chunk(delta, content, is_complete=False)
        except ModelError:
            raise
        except Exception as e:
            raise ModelError("Model call failed", raw=e, details=str(e), model=self.model) from e

        log_llm(logger, "end", model=self.model, duration=time.time() - start_time)
        return content


class MockStreamer:
    """Deterministic development stand-in for the model. Never fails."""

    name = "mock"

    def __init__(self, delay_ms: int = 150):
        self.delay_ms = delay_ms

    @staticmethod
    def reply_for(message: str) -> str:
        """Canned reply chosen by keyword in the lower-cased message."""
        lower = message.lower()
        if "hello" in lower or "hi" in lower:
            return MOCK_GREETING
        if "test" in lower:
            return MOCK_TEST
        if "how are you" in lower:
            return MOCK_STATUS
        return f'You said: "{message}". This is a mock AI response to test your chat API. Everything is working correctly!'

    async def stream(self, conversation: Sequence[ChatTurn], on_chunk: ChunkCallback) -> str:
        logger.info("Generating mock response...")
        reply = self.reply_for(_latest_user_message(conversation))

        content = ""
        for chunk in word_chunks(reply):
            content += chunk
            await on_chunk(chunk, content, is_complete=False)
            if self.delay_ms > 0:
                await asyncio.sleep(self.delay_ms / 1000.0)

        return content


def build_streamer(config, client: LLMClient = None) -> ResponseStreamer:
    """Choose the strategy once, from configuration.

    Args:
        config: RuntimeConfig
        client: Optional prebuilt LLMClient (ignored in mock mode)
    """
    if config.mock_mode:
        logger.info("Running in mock mode - OpenAI disabled")
        return MockStreamer(delay_ms=config.mock_chunk_delay_ms)

    client = client or LLMClient(api_key=config.openai_api_key, timeout=config.llm_timeout_s)
    logger.info(f"OpenAI initialized (model={config.model_chat})")
    return OpenAIStreamer(client, **config.get_llm_params())
