"""
Error handling decorators and utilities.

Provides the absorb-and-log boundary used by best-effort side channels.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .exceptions import RelayError

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])


def absorb_async_errors(context: str, logger: Optional[logging.Logger] = None):
    """Decorator that logs and swallows every exception raised by a coroutine.

    Used where failure must never propagate into the caller's outcome
    (broadcast delivery). The wrapped coroutine returns None on failure.

    Args:
        context: Label for log lines
        logger: Optional logger instance (defaults to a context-specific logger)

    Example:
        >>> @absorb_async_errors("publish")
        ... async def deliver(channel, event, data):
        ...     await client.trigger(channel, event, data)
    """

    def decorator(func: F) -> F:
        log = logger or logging.getLogger(f"relay.{context}")

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except RelayError as e:
                log.error(f"[{context}] {e.code.value}: {e}")
            except Exception as e:
                log.error(f"[{context}] Unexpected error: {e}", exc_info=True)
            return None

        return wrapper  # type: ignore

    return decorator


def log_error(
    logger: logging.Logger, error: Exception, context: Optional[str] = None, include_traceback: bool = True
) -> None:
    """Log an error with consistent formatting.

    Example:
        >>> log_error(logger, err, context="relay")
        # Logs: "[relay] VALIDATION_ERROR: Message cannot be empty"
    """
    if isinstance(error, RelayError):
        message = f"{error.code.value}: {error.message}"
        if error.context:
            message += " (" + " ".join(f"{k}={v}" for k, v in error.context.items()) + ")"
    else:
        message = str(error)

    if context:
        message = f"[{context}] {message}"

    logger.error(message, exc_info=include_traceback)
