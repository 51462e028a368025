"""
Relay Chat Session - Conversation state management

In-memory transcripts keyed by session id. Lifetime is the process
lifetime; nothing is persisted.

Concurrency: each session has its own asyncio.Lock. The orchestrator holds
it for the whole request so two requests on one session never interleave
their turns.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

from errors import ErrorCode, ProcessingError

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatTurn:
    """One message in a conversation."""

    role: Role
    content: str


@dataclass
class ConversationState:
    """Ordered, append-only transcript for a single session.

    Attributes:
        session_id: Client-supplied session identifier
        turns: Turns in conversation order; the first is always the system turn
    """

    session_id: str
    turns: List[ChatTurn] = field(default_factory=list)

    def append(self, turn: ChatTurn) -> None:
        self.turns.append(turn)

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self):
        return iter(self.turns)


class SessionStore:
    """Owns every ConversationState and the per-session locks."""

    def __init__(self, system_prompt: str):
        self.system_prompt = system_prompt
        self._sessions: Dict[str, ConversationState] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get_or_create(self, session_id: str) -> ConversationState:
        """Return the session's state, seeding a new one with the system turn."""
        state = self._sessions.get(session_id)
        if state is None:
            state = ConversationState(session_id=session_id)
            state.append(ChatTurn(role="system", content=self.system_prompt))
            self._sessions[session_id] = state
        return state

    def get(self, session_id: str) -> Optional[ConversationState]:
        return self._sessions.get(session_id)

    def append(self, session_id: str, turn: ChatTurn) -> None:
        """Append to an existing session.

        Raises:
            ProcessingError: If get_or_create() was never called for the session
        """
        state = self._sessions.get(session_id)
        if state is None:
            raise ProcessingError(
                "Session state missing",
                details=f"append before get_or_create for session {session_id!r}",
                code=ErrorCode.INTERNAL_STATE_ERROR,
                session_id=session_id,
            )
        state.append(turn)

    def lock(self, session_id: str) -> asyncio.Lock:
        """The lock serializing requests for one session."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
