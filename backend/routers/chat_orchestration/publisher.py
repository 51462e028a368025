"""
Event publishing to the per-session broadcast channel.

publish() is non-blocking and never raises. Each event becomes a delivery
task; tasks on the same channel are chained so the broker receives them in
publish order. Delivery failures are logged and dropped: the HTTP response
is the authoritative outcome, the channel is a live-update side channel.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol, Set

from errors import PublishError, absorb_async_errors
from logging_config import log_publish

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    def publish(self, channel: str, event: str, data: Dict[str, Any]) -> None:
        ...

    async def flush(self) -> None:
        ...


class PusherPublisher:
    """Fire-and-forget publisher backed by a BrokerClient."""

    def __init__(self, broker):
        self.broker = broker
        self._tails: Dict[str, asyncio.Task] = {}
        self._pending: Set[asyncio.Task] = set()

    def publish(self, channel: str, event: str, data: Dict[str, Any]) -> None:
        """Schedule delivery of one event. Must be called from the event loop."""
        previous = self._tails.get(channel)
        task = asyncio.create_task(self._deliver_after(previous, channel, event, data))
        self._tails[channel] = task
        self._pending.add(task)

        def _cleanup(t: asyncio.Task, ch: str = channel) -> None:
            self._pending.discard(t)
            if self._tails.get(ch) is t:
                self._tails.pop(ch, None)

        task.add_done_callback(_cleanup)

    async def _deliver_after(
        self, previous: Optional[asyncio.Task], channel: str, event: str, data: Dict[str, Any]
    ) -> None:
        if previous is not None:
            # previous delivery never raises; wait only for ordering
            await asyncio.wait({previous})
        await self._deliver(channel, event, data)

    @absorb_async_errors("publish", logger=logger)
    async def _deliver(self, channel: str, event: str, data: Dict[str, Any]) -> None:
        try:
            await self.broker.trigger(channel, event, data)
        except Exception as e:
            log_publish(logger, event, channel, ok=False)
            raise PublishError(f"Failed to send event {event}", details=str(e), channel=channel, event=event) from e
        log_publish(logger, event, channel)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def flush(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.wait(set(self._pending))
