"""
Relay Chat Router - HTTP endpoints

The send-message route hands the decoded body to the RelayOrchestrator and
returns its status/body unchanged. Live updates travel out-of-band on the
broker channel ``chat-<sessionId>``.

Architecture:
- chat.py: HTTP endpoints
- chat_orchestration/: Relay pipeline components
  - session.py: SessionStore and conversation state
  - validator.py: Inbound request validation
  - classifier.py: Model error classification
  - streamer.py: OpenAI and mock response strategies
  - publisher.py: Broadcast event delivery
  - orchestrator.py: RelayOrchestrator
- chat_streaming.py: Word chunking and event payload builders
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .chat_orchestration import RelayOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class SendMessageRequest(BaseModel):
    message: str
    sessionId: str
    userId: Optional[str] = None


class SendMessageResponse(BaseModel):
    success: bool
    messageId: str
    message: str


class ErrorBody(BaseModel):
    error: str
    errorCode: Optional[str] = None
    details: Optional[str] = None


class ChatClientConfig(BaseModel):
    pusherKey: str
    pusherCluster: str
    mockMode: bool


def get_orchestrator(request: Request) -> RelayOrchestrator:
    """The orchestrator built during app startup."""
    return request.app.state.orchestrator


@router.post(
    "/api/chat/send-message",
    response_model=SendMessageResponse,
    responses={
        400: {"model": ErrorBody},
        429: {"model": ErrorBody},
        500: {"model": ErrorBody},
        503: {"model": ErrorBody},
    },
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": SendMessageRequest.model_json_schema()}},
            "required": True,
        }
    },
)
async def send_message(request: Request, orchestrator: RelayOrchestrator = Depends(get_orchestrator)):
    """Accept one chat message and stream the reply to the session channel.

    The body is validated by the relay pipeline itself (not by FastAPI) so
    every failure carries the pipeline's own message and errorCode.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("message")
        logger.info(
            f"Chat API request received: has_message={bool(message)} "
            f"has_session={bool(payload.get('sessionId'))} "
            f"length={len(message) if isinstance(message, str) else 0}"
        )
    else:
        logger.info("Chat API request received: non-object body")

    result = await orchestrator.handle(payload)
    return JSONResponse(content=result.body, status_code=result.status_code)


@router.get("/api/chat/config", response_model=ChatClientConfig)
async def get_client_config(request: Request):
    """Public broker settings the browser needs to subscribe."""
    config = request.app.state.config
    return ChatClientConfig(
        pusherKey=config.pusher_key,
        pusherCluster=config.pusher_cluster,
        mockMode=config.mock_mode,
    )
