"""
Relay Chat Logging - colour-coded console output

One line per record: ``HH:MM:SS LEVL logger | message``. Relay events
(inbound message, reply, broker delivery, model call) get their own colour
tag so a request can be followed by eye in the uvicorn console.

Colours are dropped when stdout is not a terminal or NO_COLOR is set.

Usage:
    from logging_config import setup_logging, log_message_in
    setup_logging("DEBUG")
    log_message_in(logger, "hello", session="s1")
"""

import logging
import os
import sys

PALETTE = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "bold": "\033[1m",
    "inbound": "\033[96m",  # cyan
    "outbound": "\033[92m",  # green
    "broker": "\033[95m",  # magenta
    "model": "\033[94m",  # blue
    "warning": "\033[33m",
    "error": "\033[91m",
    "debug": "\033[90m",
}

_USE_COLOR = sys.stdout.isatty() and "NO_COLOR" not in os.environ


def _paint(key: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"{PALETTE[key]}{text}{PALETTE['reset']}"


class ColorFormatter(logging.Formatter):
    """Compact formatter; colours the level tag only."""

    LEVEL_KEYS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        tag = f"{record.levelname[:4]:<4}"
        key = self.LEVEL_KEYS.get(record.levelno)
        if key:
            tag = _paint(key, tag)

        # routers.chat_orchestration.publisher -> publisher
        source = record.name.rsplit(".", 1)[-1]
        line = f"{_paint('dim', self.formatTime(record, '%H:%M:%S'))} {tag} {source} | {record.getMessage()}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: int | str = logging.INFO) -> None:
    """Install the colour handler on the root logger (replacing any others)."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for noisy in ("httpx", "httpcore", "openai", "urllib3", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Relay event helpers
# -----------------------------------------------------------------------------


def log_message_in(logger: logging.Logger, message: str, **context) -> None:
    """Inbound user message, truncated to 80 chars, with key=value context."""
    shown = message if len(message) <= 80 else f"{message[:80]}..."
    extras = " ".join(f"{key}={value}" for key, value in context.items())
    logger.info(f"{_paint('inbound', 'IN ')} {shown!r} {extras}".rstrip())


def log_message_out(logger: logging.Logger, message_id: str, chars: int = 0, chunks: int = 0) -> None:
    logger.info(f"{_paint('outbound', 'OUT')} {message_id} chars={chars} chunks={chunks}")


def log_publish(logger: logging.Logger, event: str, channel: str, ok: bool = True) -> None:
    """Broker delivery. Successes only show at DEBUG."""
    tag = _paint("broker", "PUB")
    if ok:
        logger.debug(f"{tag} {channel} <- {event}")
    else:
        logger.warning(f"{tag} {channel} <- {event} failed")


def log_llm(logger: logging.Logger, state: str, model: str = "", duration: float = 0) -> None:
    """Model call boundary.

    Args:
        logger: Logger instance
        state: "start" before the request, anything else after the stream ends
        model: Model name
        duration: Seconds spent streaming (end only)
    """
    tag = _paint("model", "LLM")
    if state == "start":
        logger.info(f"{tag} -> {model}")
    else:
        logger.info(f"{tag} <- {model} streamed in {duration:.1f}s")
