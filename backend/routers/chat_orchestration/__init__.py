"""
Relay Chat Orchestration - Message relay pipeline components

Components:
- SessionStore: In-memory transcripts with one lock per session
- validate_request: Inbound body checks, returns a ValidationOutcome
- classify_model_error: Upstream failure -> (message, code, status)
- OpenAIStreamer / MockStreamer: Response strategies, picked by build_streamer
- PusherPublisher: Ordered, fire-and-forget broadcast delivery
- RelayOrchestrator: Composes the above for one request

Flow:
    validate -> record user turn -> publish user-message
             -> stream (publish assistant-message-chunk per increment)
             -> record assistant turn -> publish assistant-message-complete
"""

from .session import ChatTurn, ConversationState, SessionStore
from .validator import InboundRequest, ValidationOutcome, validate_request, MAX_MESSAGE_LENGTH
from .classifier import ClassifiedError, classify_model_error
from .streamer import ResponseStreamer, OpenAIStreamer, MockStreamer, build_streamer
from .publisher import EventPublisher, PusherPublisher
from .orchestrator import RelayOrchestrator, RelayResult, RelayStage

__all__ = [
    "ChatTurn",
    "ConversationState",
    "SessionStore",
    "InboundRequest",
    "ValidationOutcome",
    "validate_request",
    "MAX_MESSAGE_LENGTH",
    "ClassifiedError",
    "classify_model_error",
    "ResponseStreamer",
    "OpenAIStreamer",
    "MockStreamer",
    "build_streamer",
    "EventPublisher",
    "PusherPublisher",
    "RelayOrchestrator",
    "RelayResult",
    "RelayStage",
]
