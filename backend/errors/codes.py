"""
Error codes for the relay chat service.

These are the stable values sent to callers in the ``errorCode`` field of
HTTP error bodies and broadcast error events.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes.

    Categories:
    - VALIDATION_ERROR: Caller input was malformed
    - PROCESSING_ERROR: Internal failure while handling a valid request
    - Model codes: Upstream language model failures (see classifier)
    - INTERNAL_*: Configuration and invariant failures
    """

    # Caller input
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Request processing
    PROCESSING_ERROR = "PROCESSING_ERROR"

    # Upstream model failures
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    RATE_LIMITED = "RATE_LIMITED"
    AUTH_FAILED = "AUTH_FAILED"
    INVALID_REQUEST = "INVALID_REQUEST"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    # Broadcast delivery (never sent to callers)
    PUBLISH_FAILED = "PUBLISH_FAILED"

    # Internal
    INTERNAL_CONFIG_ERROR = "INTERNAL_CONFIG_ERROR"
    INTERNAL_STATE_ERROR = "INTERNAL_STATE_ERROR"
