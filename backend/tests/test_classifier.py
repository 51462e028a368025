"""
Tests for model error classification.

Errors are built from real openai SDK exception classes so the status and
code lookups see what the SDK actually raises.
"""

import socket

import httpx
import openai
import pytest

from errors import ErrorCode, ModelError
from routers.chat_orchestration import classify_model_error
from routers.chat_orchestration.classifier import MESSAGES

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status: int, body=None, message: str = "upstream said no"):
    response = httpx.Response(status, request=_REQUEST)
    return cls(message, response=response, body=body)


class CodedError(Exception):
    """Network failure carrying a Node-style ``code`` attribute."""

    def __init__(self, code):
        super().__init__(f"getaddrinfo {code}")
        self.code = code


class TestClassification:
    """Precedence table."""

    def test_quota_exceeded(self):
        err = _status_error(
            openai.RateLimitError,
            429,
            body={"code": "insufficient_quota", "type": "insufficient_quota", "message": "quota"},
        )
        result = classify_model_error(err)
        assert result.code == ErrorCode.QUOTA_EXCEEDED
        assert result.http_status == 429
        assert result.user_message == "OpenAI API quota exceeded."

    def test_quota_code_in_nested_body(self):
        err = _status_error(openai.RateLimitError, 429, body={"error": {"code": "insufficient_quota"}})
        assert classify_model_error(err).code == ErrorCode.QUOTA_EXCEEDED

    def test_rate_limited(self):
        err = _status_error(openai.RateLimitError, 429, body={"code": "rate_limit_exceeded"})
        result = classify_model_error(err)
        assert result.code == ErrorCode.RATE_LIMITED
        assert result.http_status == 429

    def test_auth_failed_maps_to_500(self):
        result = classify_model_error(_status_error(openai.AuthenticationError, 401))
        assert result.code == ErrorCode.AUTH_FAILED
        assert result.http_status == 500

    def test_invalid_request(self):
        result = classify_model_error(_status_error(openai.BadRequestError, 400))
        assert result.code == ErrorCode.INVALID_REQUEST
        assert result.http_status == 400

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_server_errors(self, status):
        result = classify_model_error(_status_error(openai.InternalServerError, status))
        assert result.code == ErrorCode.SERVICE_UNAVAILABLE
        assert result.http_status == 503

    def test_timeout_is_service_unavailable(self):
        result = classify_model_error(openai.APITimeoutError(request=_REQUEST))
        assert result.code == ErrorCode.SERVICE_UNAVAILABLE
        assert result.http_status == 503

    @pytest.mark.parametrize(
        "error",
        [
            openai.APIConnectionError(request=_REQUEST),
            httpx.ConnectError("refused"),
            ConnectionRefusedError("refused"),
            socket.gaierror("no such host"),
            CodedError("ENOTFOUND"),
            CodedError("ECONNREFUSED"),
        ],
    )
    def test_connection_failures(self, error):
        result = classify_model_error(error)
        assert result.code == ErrorCode.CONNECTION_ERROR
        assert result.http_status == 503

    def test_unknown(self):
        result = classify_model_error(ValueError("odd"))
        assert result.code == ErrorCode.UNKNOWN_ERROR
        assert result.http_status == 500
        assert result.user_message == MESSAGES[ErrorCode.UNKNOWN_ERROR]

    def test_status_attribute_on_plain_object(self):
        """Errors exposing ``status`` instead of ``status_code`` still classify."""

        class Upstream(Exception):
            status = 503

        assert classify_model_error(Upstream("down")).code == ErrorCode.SERVICE_UNAVAILABLE

    def test_status_wins_over_connection_code(self):
        err = CodedError("ECONNREFUSED")
        err.status_code = 401
        assert classify_model_error(err).code == ErrorCode.AUTH_FAILED


class TestWrapping:
    """ModelError unwrapping and detail handling."""

    def test_model_error_is_unwrapped(self):
        raw = _status_error(openai.RateLimitError, 429, body={"code": "rate_limit_exceeded"})
        wrapped = ModelError("Model call failed", raw=raw)
        assert classify_model_error(wrapped).code == ErrorCode.RATE_LIMITED

    def test_user_message_never_contains_raw_text(self):
        result = classify_model_error(RuntimeError("sk-secret-internal"))
        assert "sk-secret-internal" not in result.user_message
        assert "sk-secret-internal" in result.detail
