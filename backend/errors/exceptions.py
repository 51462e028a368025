"""
Exception hierarchy for the relay chat service.

Every class carries class-level ``code`` and ``http_status`` defaults;
an instance may override the code. Extra keyword arguments
land in ``context`` and are logged, never sent to callers.
"""

from typing import Any, Dict, Optional
from .codes import ErrorCode


def _named(context: Dict[str, Any], **named: Any) -> Dict[str, Any]:
    """Merge the non-empty named values into context."""
    merged = dict(context)
    merged.update({key: value for key, value in named.items() if value})
    return merged


class RelayError(Exception):
    """Root of the hierarchy.

    Attributes:
        message: Short human-readable text (what callers see)
        details: Longer diagnostic text (debug responses only)
        context: Debug key/values, or None
    """

    code: ErrorCode = ErrorCode.PROCESSING_ERROR
    http_status: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        **context: Any,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.context = context or None
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.message} - {self.details}" if self.details else self.message


class ValidationError(RelayError):
    """Caller input failed validation."""

    code = ErrorCode.VALIDATION_ERROR
    http_status = 400

    def __init__(self, message: str, details: Optional[str] = None, parameter: Optional[str] = None, **context: Any):
        super().__init__(message, details, **_named(context, parameter=parameter))


class ModelError(RelayError):
    """The upstream language model call failed.

    The raw SDK/network exception is kept on ``raw`` so the classifier can
    inspect status codes without the wrapper leaking into responses.
    """

    code = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        raw: Optional[BaseException] = None,
        details: Optional[str] = None,
        model: Optional[str] = None,
        **context: Any,
    ):
        self.raw = raw
        super().__init__(message, details, **_named(context, model=model))


class ProcessingError(RelayError):
    """A valid request could not be completed."""


class PublishError(RelayError):
    """Broadcast delivery failed. Logged only, never surfaced."""

    code = ErrorCode.PUBLISH_FAILED

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        channel: Optional[str] = None,
        event: Optional[str] = None,
        **context: Any,
    ):
        super().__init__(message, details, **_named(context, channel=channel, event=event))


class ConfigError(RelayError):
    """Required configuration is missing or invalid."""

    code = ErrorCode.INTERNAL_CONFIG_ERROR

    def __init__(self, message: str, details: Optional[str] = None, variable: Optional[str] = None, **context: Any):
        super().__init__(message, details, **_named(context, variable=variable))
