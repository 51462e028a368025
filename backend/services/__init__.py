"""
Relay Services - Clients for the external managed services.

- llm_client: OpenAI chat completion streaming
- broker_client: Pusher Channels event delivery
"""

from .llm_client import LLMClient
from .broker_client import BrokerClient

__all__ = ["LLMClient", "BrokerClient"]
