"""
Relay Chat Streaming - Response streaming utilities

Word-level chunking for simulated streaming and the payload builders for
every broadcast event type.
"""

import random
import string
import time
from typing import Any, Dict, List

from errors import utc_timestamp

# Broadcast event names
EVENT_USER_MESSAGE = "user-message"
EVENT_ASSISTANT_CHUNK = "assistant-message-chunk"
EVENT_ASSISTANT_COMPLETE = "assistant-message-complete"
EVENT_SERVICE_ERROR = "service-error"
EVENT_ERROR = "error"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def channel_for(session_id: str) -> str:
    """Broadcast channel name for a session."""
    return f"chat-{session_id}"


def new_message_id() -> str:
    """Unique id for one assistant turn, e.g. msg_1718000000000_k3j9x0a2b"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"msg_{int(time.time() * 1000)}_{suffix}"


def word_chunks(text: str) -> List[str]:
    """Split text into word increments that concatenate back to ``text``.

    Every chunk after the first carries its leading space.
    """
    if not text:
        return []
    words = text.split(" ")
    return [word if i == 0 else f" {word}" for i, word in enumerate(words)]


def build_user_event(message: str, user_id: str) -> Dict[str, Any]:
    return {
        "message": message,
        "userId": user_id,
        "timestamp": utc_timestamp(),
        "type": "user",
    }


def build_chunk_event(message_id: str, content: str, chunk: str) -> Dict[str, Any]:
    """In-progress assistant event. ``content`` is cumulative, ``chunk`` the delta."""
    return {
        "messageId": message_id,
        "content": content,
        "chunk": chunk,
        "timestamp": utc_timestamp(),
        "isComplete": False,
        "type": "assistant",
    }


def build_complete_event(message_id: str, content: str) -> Dict[str, Any]:
    """Final assistant event carrying the full text."""
    return {
        "messageId": message_id,
        "content": content,
        "timestamp": utc_timestamp(),
        "isComplete": True,
        "type": "assistant",
    }
