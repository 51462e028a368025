"""
Standard response builders for the relay chat service.

Provides consistent body formats for HTTP responses and broadcast
error events.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from .codes import ErrorCode
from .exceptions import RelayError


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def error_response(
    error: RelayError | Exception,
    include_details: bool = False,
    details: Optional[str] = None,
) -> dict:
    """Build an HTTP error body.

    Args:
        error: The exception to convert to a response
        include_details: Whether to include the debug ``details`` field
        details: Explicit debug detail (defaults to the error's own details/text)

    Returns:
        Error body with ``error`` and ``errorCode`` keys

    Example:
        >>> from errors import ValidationError, error_response
        >>> error_response(ValidationError("Message cannot be empty"))
        {"error": "Message cannot be empty", "errorCode": "VALIDATION_ERROR"}
    """
    if isinstance(error, RelayError):
        body = {"error": error.message, "errorCode": error.code.value}
        debug_detail = details if details is not None else (error.details or error.message)
    else:
        # Fallback for non-relay exceptions: never expose the raw text
        body = {"error": "Failed to process message", "errorCode": ErrorCode.PROCESSING_ERROR.value}
        debug_detail = details if details is not None else str(error)

    if include_details:
        body["details"] = debug_detail
    return body


def error_event(
    message: str,
    code: ErrorCode,
    details: Optional[str] = None,
) -> dict:
    """Build the payload for a broadcast ``error``/``service-error`` event."""
    event = {
        "error": message,
        "timestamp": utc_timestamp(),
        "errorCode": code.value,
    }
    if details is not None:
        event["details"] = details
    return event


def success_response(data: Optional[dict] = None, **kwargs: Any) -> dict:
    """Build a standard success response dictionary.

    Example:
        >>> success_response(messageId="msg_1", message="Hi")
        {"success": True, "messageId": "msg_1", "message": "Hi"}
    """
    response = {"success": True}

    if data:
        response.update(data)
    if kwargs:
        response.update(kwargs)

    return response
