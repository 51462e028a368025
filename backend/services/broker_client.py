"""
Broker Client - Pusher Channels connection wrapper.

The Pusher HTTP SDK is blocking; trigger() runs it in a worker thread so
callers on the event loop are never stalled by broker latency.

Usage:
    from services.broker_client import BrokerClient

    broker = BrokerClient(app_id, key, secret, cluster)
    await broker.trigger("chat-s1", "user-message", {...})
"""

import asyncio
import logging
from typing import Any, Dict

import pusher

logger = logging.getLogger(__name__)


class BrokerClient:
    """Async facade over ``pusher.Pusher``."""

    def __init__(self, app_id: str, key: str, secret: str, cluster: str, ssl: bool = True, timeout: int = 5):
        self.cluster = cluster
        self._pusher = pusher.Pusher(
            app_id=app_id,
            key=key,
            secret=secret,
            cluster=cluster,
            ssl=ssl,
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config) -> "BrokerClient":
        """Build from a RuntimeConfig."""
        return cls(
            app_id=config.pusher_app_id,
            key=config.pusher_key,
            secret=config.pusher_secret,
            cluster=config.pusher_cluster,
        )

    async def trigger(self, channel: str, event: str, data: Dict[str, Any]) -> Any:
        """Send one event to one channel."""
        return await asyncio.to_thread(self._pusher.trigger, channel, event, data)
