"""
Inbound request validation.

validate_request() never raises: it returns a ValidationOutcome holding
either the normalized request or the ValidationError for the first rule
that failed.
"""

from dataclasses import dataclass
from typing import Any, Optional

from errors import ValidationError

MAX_MESSAGE_LENGTH = 4000
DEFAULT_USER_ID = "anonymous"


@dataclass(frozen=True)
class InboundRequest:
    message: str
    session_id: str
    user_id: str = DEFAULT_USER_ID


@dataclass(frozen=True)
class ValidationOutcome:
    """Either ``request`` (ok) or ``error`` is set, never both."""

    request: Optional[InboundRequest] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(message: str, parameter: Optional[str] = None) -> ValidationOutcome:
    return ValidationOutcome(error=ValidationError(message, parameter=parameter))


def validate_request(payload: Any) -> ValidationOutcome:
    """Check and normalize a decoded JSON body.

    Rules, first failure wins:
        1. payload is an object
        2. message is a string
        3. message is non-empty after trimming
        4. sessionId is a non-empty string
        5. trimmed message is at most MAX_MESSAGE_LENGTH characters
    userId falls back to "anonymous".
    """
    if not isinstance(payload, dict):
        return _fail("Request body must be an object")

    message = payload.get("message")
    if not isinstance(message, str):
        return _fail("Message is required and must be a string", parameter="message")

    message = message.strip()
    if not message:
        return _fail("Message cannot be empty", parameter="message")

    session_id = payload.get("sessionId")
    if not isinstance(session_id, str) or not session_id:
        return _fail("SessionId is required and must be a string", parameter="sessionId")

    if len(message) > MAX_MESSAGE_LENGTH:
        return _fail(f"Message too long (max {MAX_MESSAGE_LENGTH} characters)", parameter="message")

    user_id = payload.get("userId")
    if not isinstance(user_id, str) or not user_id:
        user_id = DEFAULT_USER_ID

    return ValidationOutcome(request=InboundRequest(message=message, session_id=session_id, user_id=user_id))
