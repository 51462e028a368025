"""
Relay Chat - FastAPI backend
Accepts chat messages over HTTP, streams model replies to a Pusher channel
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from routers import chat
from routers.chat_orchestration import PusherPublisher, RelayOrchestrator, SessionStore, build_streamer
from services import BrokerClient, LLMClient
from logging_config import setup_logging
from config import runtime_config

setup_logging(runtime_config.log_level)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent
STATIC_DIR = BASE_DIR / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events"""
    # Startup: fail fast on missing credentials
    runtime_config.validate()
    logger.debug(f"Config: {runtime_config.to_dict()}")

    broker = BrokerClient.from_config(runtime_config)
    publisher = PusherPublisher(broker)
    store = SessionStore(system_prompt=runtime_config.system_prompt)

    llm_client = None
    if not runtime_config.mock_mode:
        llm_client = LLMClient(api_key=runtime_config.openai_api_key, timeout=runtime_config.llm_timeout_s)
    streamer = build_streamer(runtime_config, client=llm_client)

    app.state.config = runtime_config
    app.state.store = store
    app.state.publisher = publisher
    app.state.orchestrator = RelayOrchestrator(store, streamer, publisher, debug=runtime_config.debug)

    logger.info(
        f"Relay chat ready (env={runtime_config.app_env}, streamer={streamer.name}, "
        f"cluster={runtime_config.pusher_cluster})"
    )

    yield

    # Shutdown: let in-flight broadcasts land
    if publisher.pending:
        logger.info(f"Flushing {publisher.pending} pending broadcast(s)")
    await publisher.flush()

    if llm_client is not None:
        await llm_client.close()
        logger.info("OpenAI client closed")

    logger.info("Relay chat signing off")


app = FastAPI(
    title="Relay Chat",
    description="Conversational relay between an HTTP client, OpenAI and Pusher",
    version="1.0.0",
    lifespan=lifespan,
)


# Security Headers Middleware
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


MAX_BODY_SIZE_API = 1 * 1024 * 1024  # 1MB


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests with bodies exceeding the size limit."""

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            size = int(content_length)
            if size > MAX_BODY_SIZE_API:
                return JSONResponse(
                    status_code=413,
                    content={"error": f"Request body too large ({size} bytes, limit {MAX_BODY_SIZE_API} bytes)"},
                )
        return await call_next(request)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime_config.get_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(chat.router, tags=["chat"])


@app.get("/api/health")
async def health(request: Request):
    """Liveness plus a count of in-memory sessions."""
    store = getattr(request.app.state, "store", None)
    config = getattr(request.app.state, "config", runtime_config)
    return {
        "status": "healthy",
        "mode": "mock" if config.mock_mode else "openai",
        "sessions": len(store) if store is not None else 0,
    }


@app.get("/", include_in_schema=False)
async def index():
    """Browser chat page subscribed to the session channel."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
