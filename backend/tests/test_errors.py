"""
Tests for the relay error handling module.
"""

import asyncio
import logging
import re

from errors import (
    ErrorCode,
    RelayError,
    ValidationError,
    ModelError,
    ProcessingError,
    PublishError,
    ConfigError,
    error_response,
    error_event,
    success_response,
    utc_timestamp,
    absorb_async_errors,
    log_error,
)


class TestErrorCodes:
    """Test error code enum."""

    def test_error_codes_are_strings(self):
        """Error codes compare equal to their wire values."""
        assert ErrorCode.VALIDATION_ERROR.value == "VALIDATION_ERROR"
        assert ErrorCode.QUOTA_EXCEEDED == "QUOTA_EXCEEDED"

    def test_model_codes_present(self):
        expected = {
            "QUOTA_EXCEEDED",
            "RATE_LIMITED",
            "AUTH_FAILED",
            "INVALID_REQUEST",
            "SERVICE_UNAVAILABLE",
            "CONNECTION_ERROR",
            "UNKNOWN_ERROR",
        }
        assert expected <= {c.value for c in ErrorCode}


class TestRelayError:
    """Test base RelayError exception."""

    def test_basic_creation(self):
        err = RelayError("Test error")
        assert err.message == "Test error"
        assert err.details is None
        assert err.code == ErrorCode.PROCESSING_ERROR
        assert err.http_status == 500

    def test_with_context(self):
        err = RelayError("Test error", foo="bar", count=42)
        assert err.context == {"foo": "bar", "count": 42}

    def test_str_representation(self):
        """String representation includes message and details."""
        assert str(RelayError("Test error", details="More info")) == "Test error - More info"
        assert str(RelayError("Test error")) == "Test error"

    def test_code_override(self):
        err = RelayError("Broken", code=ErrorCode.INTERNAL_STATE_ERROR)
        assert err.code == ErrorCode.INTERNAL_STATE_ERROR
        assert ProcessingError("x").code == ErrorCode.PROCESSING_ERROR


class TestSubclasses:
    """Defaults carried by each subclass."""

    def test_validation_error(self):
        err = ValidationError("Message cannot be empty", parameter="message")
        assert err.code == ErrorCode.VALIDATION_ERROR
        assert err.http_status == 400
        assert err.context == {"parameter": "message"}

    def test_model_error_keeps_raw(self):
        raw = TimeoutError("slow")
        err = ModelError("Model call failed", raw=raw, model="gpt-3.5-turbo")
        assert err.raw is raw
        assert err.context == {"model": "gpt-3.5-turbo"}

    def test_processing_error(self):
        err = ProcessingError("No response generated")
        assert err.code == ErrorCode.PROCESSING_ERROR
        assert err.http_status == 500

    def test_publish_error_context(self):
        err = PublishError("Failed", channel="chat-s1", event="user-message")
        assert err.code == ErrorCode.PUBLISH_FAILED
        assert err.context == {"channel": "chat-s1", "event": "user-message"}

    def test_config_error_names_variable(self):
        err = ConfigError("Missing required environment variable: PUSHER_KEY", variable="PUSHER_KEY")
        assert err.code == ErrorCode.INTERNAL_CONFIG_ERROR
        assert err.context["variable"] == "PUSHER_KEY"


class TestResponses:
    """Response and event builders."""

    def test_error_response_relay_error(self):
        body = error_response(ValidationError("Message cannot be empty"))
        assert body == {"error": "Message cannot be empty", "errorCode": "VALIDATION_ERROR"}

    def test_error_response_hides_foreign_exception_text(self):
        body = error_response(KeyError("secret internals"))
        assert body == {"error": "Failed to process message", "errorCode": "PROCESSING_ERROR"}

    def test_error_response_details_only_when_asked(self):
        err = ProcessingError("Failed to process message", details="boom")
        assert "details" not in error_response(err)
        assert error_response(err, include_details=True)["details"] == "boom"
        assert error_response(err, include_details=True, details="other")["details"] == "other"

    def test_error_event_shape(self):
        event = error_event("Rate limited", ErrorCode.RATE_LIMITED)
        assert event["error"] == "Rate limited"
        assert event["errorCode"] == "RATE_LIMITED"
        assert "timestamp" in event
        assert "details" not in event

        assert error_event("x", ErrorCode.PROCESSING_ERROR, details="d")["details"] == "d"

    def test_success_response(self):
        assert success_response(messageId="m1", message="Hi") == {
            "success": True,
            "messageId": "m1",
            "message": "Hi",
        }
        assert success_response({"a": 1}) == {"success": True, "a": 1}

    def test_utc_timestamp_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())


class TestHandlers:
    """absorb_async_errors and log_error."""

    def test_absorb_returns_value_on_success(self):
        @absorb_async_errors("test")
        async def ok():
            return 7

        assert asyncio.run(ok()) == 7

    def test_absorb_swallows_relay_error(self, caplog):
        @absorb_async_errors("test")
        async def fails():
            raise PublishError("Failed to send event", channel="chat-s1")

        with caplog.at_level(logging.ERROR):
            assert asyncio.run(fails()) is None
        assert "PUBLISH_FAILED" in caplog.text

    def test_absorb_swallows_unexpected_error(self, caplog):
        @absorb_async_errors("test")
        async def fails():
            raise RuntimeError("kaboom")

        with caplog.at_level(logging.ERROR):
            assert asyncio.run(fails()) is None
        assert "kaboom" in caplog.text

    def test_log_error_formats_code_and_context(self, caplog):
        logger = logging.getLogger("relay.test")
        with caplog.at_level(logging.ERROR):
            log_error(logger, ValidationError("bad"), context="relay", include_traceback=False)
        assert "[relay] VALIDATION_ERROR: bad" in caplog.text

    def test_log_error_includes_context(self, caplog):
        logger = logging.getLogger("relay.test")
        err = PublishError("Failed to send event", channel="chat-s1", event="user-message")
        with caplog.at_level(logging.ERROR):
            log_error(logger, err, include_traceback=False)
        assert "PUBLISH_FAILED: Failed to send event (channel=chat-s1 event=user-message)" in caplog.text
