"""
Model error classification.

Maps an upstream model failure to a stable (user message, code, status)
triple. The user message is fixed per branch; the raw error text only
travels in ``detail`` for debug responses.

Precedence:
    429 + quota  -> QUOTA_EXCEEDED      429
    429          -> RATE_LIMITED        429
    401          -> AUTH_FAILED         500
    400          -> INVALID_REQUEST     400
    >=500        -> SERVICE_UNAVAILABLE 503
    timeout      -> SERVICE_UNAVAILABLE 503
    connection   -> CONNECTION_ERROR    503
    otherwise    -> UNKNOWN_ERROR       500

``openai.APITimeoutError`` subclasses ``APIConnectionError`` but classifies
as SERVICE_UNAVAILABLE; it is matched before the connection branch.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import openai

from errors import ErrorCode, ModelError

logger = logging.getLogger(__name__)

QUOTA_CODE = "insufficient_quota"
CONNECTION_CODES = {"ENOTFOUND", "ECONNREFUSED"}

MESSAGES = {
    ErrorCode.QUOTA_EXCEEDED: "OpenAI API quota exceeded.",
    ErrorCode.RATE_LIMITED: "OpenAI rate limit exceeded. Please try again in a moment.",
    ErrorCode.AUTH_FAILED: "OpenAI API key is invalid. Please check your API key configuration.",
    ErrorCode.INVALID_REQUEST: "Invalid request to OpenAI. Please try a different message.",
    ErrorCode.SERVICE_UNAVAILABLE: "OpenAI service is currently unavailable. Please try again later.",
    ErrorCode.CONNECTION_ERROR: "Unable to connect to OpenAI. Please check your internet connection.",
    ErrorCode.UNKNOWN_ERROR: "An unexpected error occurred while processing your message.",
}


@dataclass(frozen=True)
class ClassifiedError:
    user_message: str
    code: ErrorCode
    http_status: int
    detail: Optional[str] = None


def _status_of(error: Any) -> Optional[int]:
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def _code_of(error: Any) -> Optional[str]:
    """Error code from the exception, or from an OpenAI-style error body."""
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict):
            for key in ("code", "type"):
                if isinstance(inner.get(key), str):
                    return inner[key]
    return None


def _is_connection_failure(error: Any) -> bool:
    if isinstance(error, openai.APITimeoutError):
        return False
    if isinstance(error, (openai.APIConnectionError, httpx.ConnectError, ConnectionRefusedError, socket.gaierror)):
        return True
    return _code_of(error) in CONNECTION_CODES


def _classified(code: ErrorCode, status: int, raw: Any) -> ClassifiedError:
    return ClassifiedError(user_message=MESSAGES[code], code=code, http_status=status, detail=str(raw))


def classify_model_error(raw: Any) -> ClassifiedError:
    """Classify an upstream failure. ModelError wrappers are unwrapped first."""
    if isinstance(raw, ModelError) and raw.raw is not None:
        raw = raw.raw

    status = _status_of(raw)
    logger.error(
        f"OpenAI error: type={type(raw).__name__} status={status} code={_code_of(raw)} message={raw}"
    )

    if status == 429:
        if _code_of(raw) == QUOTA_CODE:
            return _classified(ErrorCode.QUOTA_EXCEEDED, 429, raw)
        return _classified(ErrorCode.RATE_LIMITED, 429, raw)

    if status == 401:
        return _classified(ErrorCode.AUTH_FAILED, 500, raw)

    if status == 400:
        return _classified(ErrorCode.INVALID_REQUEST, 400, raw)

    if status is not None and status >= 500:
        return _classified(ErrorCode.SERVICE_UNAVAILABLE, 503, raw)

    if isinstance(raw, openai.APITimeoutError):
        return _classified(ErrorCode.SERVICE_UNAVAILABLE, 503, raw)

    if _is_connection_failure(raw):
        return _classified(ErrorCode.CONNECTION_ERROR, 503, raw)

    return _classified(ErrorCode.UNKNOWN_ERROR, 500, raw)
