"""
Relay Orchestrator - one chat message from HTTP body to broadcast events.

Stages:
    VALIDATING -> SESSION_RESOLVED -> USER_EVENT_PUBLISHED -> STREAMING -> COMPLETED
    any stage  -> ERRORED

Validation failures return 400 with no broadcast. Model failures are
classified, broadcast as ``service-error`` and returned with the classified
status; the user turn stays recorded. Any other failure after the session
is known returns 500 PROCESSING_ERROR and is broadcast as ``error``.
Broadcasts are best-effort and never change the result.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from errors import (
    ErrorCode,
    ModelError,
    ProcessingError,
    RelayError,
    error_event,
    error_response,
    log_error,
    success_response,
)
from logging_config import log_message_in, log_message_out
from routers.chat_streaming import (
    EVENT_ASSISTANT_CHUNK,
    EVENT_ASSISTANT_COMPLETE,
    EVENT_ERROR,
    EVENT_SERVICE_ERROR,
    EVENT_USER_MESSAGE,
    build_chunk_event,
    build_complete_event,
    build_user_event,
    channel_for,
    new_message_id,
)

from .classifier import classify_model_error
from .publisher import EventPublisher
from .session import ChatTurn, SessionStore
from .streamer import ResponseStreamer
from .validator import InboundRequest, validate_request

logger = logging.getLogger(__name__)

PROCESSING_FAILED_MESSAGE = "Failed to process message"


class RelayStage(str, Enum):
    VALIDATING = "validating"
    SESSION_RESOLVED = "session_resolved"
    USER_EVENT_PUBLISHED = "user_event_published"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"


@dataclass
class RelayResult:
    """HTTP status and JSON body for one request.

    ``failed_at`` is the last stage reached before an error.
    """

    status_code: int
    body: Dict[str, Any]
    stage: RelayStage = RelayStage.COMPLETED
    failed_at: Optional[RelayStage] = None
    message_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


@dataclass
class _RelayProgress:
    stage: RelayStage = RelayStage.VALIDATING
    session_id: Optional[str] = None


class RelayOrchestrator:
    """Composes validator, session store, streamer and publisher.

    Args:
        store: Session store owning all conversation state
        streamer: Response strategy chosen at startup
        publisher: Best-effort broadcast publisher
        debug: Include ``details`` in error bodies and events
    """

    def __init__(
        self,
        store: SessionStore,
        streamer: ResponseStreamer,
        publisher: EventPublisher,
        debug: bool = False,
    ):
        self.store = store
        self.streamer = streamer
        self.publisher = publisher
        self.debug = debug

    async def handle(self, payload: Any) -> RelayResult:
        """Process one decoded request body."""
        progress = _RelayProgress()
        try:
            outcome = validate_request(payload)
            if not outcome.ok:
                err = outcome.error
                logger.warning(f"Validation failed: {err.message}")
                return RelayResult(
                    err.http_status,
                    error_response(err, include_details=self.debug),
                    stage=RelayStage.ERRORED,
                    failed_at=RelayStage.VALIDATING,
                )

            request = outcome.request
            progress.session_id = request.session_id
            logger.info(f"Processing message for session: {request.session_id}")

            # one in-flight request per session; the error event goes out before release
            async with self.store.lock(request.session_id):
                try:
                    return await self._relay(request, progress)
                except Exception as e:
                    return self._processing_failure(e, progress)

        except Exception as e:
            return self._processing_failure(e, progress)

    async def _relay(self, request: InboundRequest, progress: _RelayProgress) -> RelayResult:
        session_id = request.session_id
        channel = channel_for(session_id)

        if session_id not in self.store:
            logger.info("Created new conversation")
        conversation = self.store.get_or_create(session_id)
        self.store.append(session_id, ChatTurn(role="user", content=request.message))
        progress.stage = RelayStage.SESSION_RESOLVED
        log_message_in(logger, request.message, session=session_id, user=request.user_id, turns=len(conversation))

        self.publisher.publish(channel, EVENT_USER_MESSAGE, build_user_event(request.message, request.user_id))
        progress.stage = RelayStage.USER_EVENT_PUBLISHED

        message_id = new_message_id()
        chunk_count = 0

        async def on_chunk(chunk: str, accumulated: str, is_complete: bool = False) -> None:
            nonlocal chunk_count
            chunk_count += 1
            self.publisher.publish(channel, EVENT_ASSISTANT_CHUNK, build_chunk_event(message_id, accumulated, chunk))

        progress.stage = RelayStage.STREAMING
        try:
            assistant_message = await self.streamer.stream(list(conversation), on_chunk)
        except ModelError as e:
            return self._model_failure(e, channel, message_id)

        logger.info(f"Generated response length: {len(assistant_message)}")
        if not assistant_message.strip():
            raise ProcessingError("No response generated", message_id=message_id)

        self.store.append(session_id, ChatTurn(role="assistant", content=assistant_message))
        self.publisher.publish(channel, EVENT_ASSISTANT_COMPLETE, build_complete_event(message_id, assistant_message))
        progress.stage = RelayStage.COMPLETED
        log_message_out(logger, message_id, chars=len(assistant_message), chunks=chunk_count)

        return RelayResult(
            200,
            success_response(messageId=message_id, message=assistant_message),
            message_id=message_id,
        )

    def _model_failure(self, error: ModelError, channel: str, message_id: str) -> RelayResult:
        classified = classify_model_error(error)
        self.publisher.publish(
            channel,
            EVENT_SERVICE_ERROR,
            error_event(classified.user_message, classified.code),
        )

        body = {"error": classified.user_message, "errorCode": classified.code.value}
        if self.debug:
            body["details"] = classified.detail
        return RelayResult(
            classified.http_status,
            body,
            stage=RelayStage.ERRORED,
            failed_at=RelayStage.STREAMING,
            message_id=message_id,
        )

    def _processing_failure(self, error: Exception, progress: _RelayProgress) -> RelayResult:
        log_error(logger, error, context=f"relay:{progress.stage.value}")

        detail = error.message if isinstance(error, RelayError) else str(error)
        wrapped = ProcessingError(PROCESSING_FAILED_MESSAGE, details=detail)

        if progress.session_id:
            self.publisher.publish(
                channel_for(progress.session_id),
                EVENT_ERROR,
                error_event(PROCESSING_FAILED_MESSAGE, ErrorCode.PROCESSING_ERROR, detail if self.debug else None),
            )

        return RelayResult(
            wrapped.http_status,
            error_response(wrapped, include_details=self.debug),
            stage=RelayStage.ERRORED,
            failed_at=progress.stage,
        )
