"""
Relay Chat Errors

- codes: ErrorCode values sent to callers as ``errorCode``
- exceptions: RelayError and its subclasses
- response: HTTP error bodies and broadcast error payloads
- handlers: absorb_async_errors decorator and log_error

Typical use at the HTTP boundary:

    from errors import ValidationError, error_response

    err = ValidationError("Message cannot be empty", parameter="message")
    return JSONResponse(error_response(err), status_code=err.http_status)
"""

from .codes import ErrorCode
from .exceptions import (
    RelayError,
    ValidationError,
    ModelError,
    ProcessingError,
    PublishError,
    ConfigError,
)
from .response import (
    error_response,
    error_event,
    success_response,
    utc_timestamp,
)
from .handlers import (
    absorb_async_errors,
    log_error,
)

__all__ = [
    # Error codes
    "ErrorCode",
    # Exceptions
    "RelayError",
    "ValidationError",
    "ModelError",
    "ProcessingError",
    "PublishError",
    "ConfigError",
    # Response builders
    "error_response",
    "error_event",
    "success_response",
    "utc_timestamp",
    # Decorators
    "absorb_async_errors",
    "log_error",
]
