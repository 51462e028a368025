"""
Shared pytest fixtures for the relay chat tests.

Stand-ins for the two external services:
- RecordingPublisher: synchronous publisher that keeps every event in order
- FakeBroker: BrokerClient replacement with optional per-event failures
- ScriptedStreamer: ResponseStreamer that emits fixed deltas or raises
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from routers.chat_orchestration import MockStreamer, RelayOrchestrator, SessionStore

TEST_SYSTEM_PROMPT = "You are a test assistant."


class RecordingPublisher:
    """Records (channel, event, data) tuples; delivery is immediate."""

    def __init__(self):
        self.events: List[Tuple[str, str, Dict[str, Any]]] = []

    def publish(self, channel: str, event: str, data: Dict[str, Any]) -> None:
        self.events.append((channel, event, data))

    async def flush(self) -> None:
        return None

    @property
    def pending(self) -> int:
        return 0

    def names(self, channel: Optional[str] = None) -> List[str]:
        return [e for ch, e, _ in self.events if channel is None or ch == channel]

    def of(self, event: str) -> List[Dict[str, Any]]:
        return [data for _, e, data in self.events if e == event]


class FakeBroker:
    """Async trigger() that records calls and can fail chosen events."""

    def __init__(self, fail_events: Sequence[str] = (), delays: Optional[Dict[str, float]] = None):
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.fail_events = set(fail_events)
        self.delays = delays or {}

    async def trigger(self, channel: str, event: str, data: Dict[str, Any]) -> Dict[str, Any]:
        delay = self.delays.get(event, 0)
        if delay:
            await asyncio.sleep(delay)
        if event in self.fail_events:
            raise ConnectionError(f"broker rejected {event}")
        self.calls.append((channel, event, data))
        return {}


class ScriptedStreamer:
    """Emits ``deltas`` through on_chunk, then raises ``error`` if set."""

    name = "scripted"

    def __init__(self, deltas: Sequence[str] = ("Hi", " there"), error: Optional[BaseException] = None):
        self.deltas = list(deltas)
        self.error = error
        self.seen: List[List[Any]] = []

    async def stream(self, conversation, on_chunk) -> str:
        self.seen.append(list(conversation))
        content = ""
        for delta in self.deltas:
            content += delta
            await on_chunk(delta, content, is_complete=False)
        if self.error is not None:
            raise self.error
        return content


@pytest.fixture
def publisher():
    """Recording publisher with synchronous delivery."""
    return RecordingPublisher()


@pytest.fixture
def store():
    return SessionStore(system_prompt=TEST_SYSTEM_PROMPT)


@pytest.fixture
def mock_streamer():
    """Mock strategy without pacing delay."""
    return MockStreamer(delay_ms=0)


@pytest.fixture
def orchestrator(store, mock_streamer, publisher):
    """Orchestrator wired to the mock streamer and recording publisher."""
    return RelayOrchestrator(store, mock_streamer, publisher, debug=False)


@pytest.fixture
def scripted_streamer():
    """Factory: scripted_streamer(deltas=..., error=...)."""
    return ScriptedStreamer


@pytest.fixture
def fake_broker():
    """Factory: fake_broker(fail_events=..., delays=...)."""
    return FakeBroker
