"""
Runtime Configuration for the relay chat service.

Provides a singleton RuntimeConfig whose fields default from environment
variables. Broker credentials are always required; the model API key is
required unless development mock mode is on.

Usage:
    from config import runtime_config
    runtime_config.validate()
    if runtime_config.mock_mode:
        ...
"""

import os
from dataclasses import dataclass, field, fields
from typing import Dict, Any, List

from errors import ConfigError

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant. Respond conversationally and be engaging."

# Always required, regardless of mode
BROKER_ENV_VARS = ("PUSHER_APP_ID", "PUSHER_KEY", "PUSHER_SECRET", "PUSHER_CLUSTER")

# Fields never exported in clear text
_SECRET_FIELDS = {"pusher_secret", "openai_api_key"}


def _env_flag(key: str, default: str = "false") -> bool:
    return os.environ.get(key, default).strip().lower() == "true"


@dataclass
class RuntimeConfig:
    """
    Configuration for the relay service.

    Every field defaults from an environment variable; tests pass
    explicit values to the constructor instead.
    """

    # Broker (Pusher Channels)
    pusher_app_id: str = field(default_factory=lambda: os.environ.get("PUSHER_APP_ID", ""))
    pusher_key: str = field(default_factory=lambda: os.environ.get("PUSHER_KEY", ""))
    pusher_secret: str = field(default_factory=lambda: os.environ.get("PUSHER_SECRET", ""), repr=False)
    pusher_cluster: str = field(default_factory=lambda: os.environ.get("PUSHER_CLUSTER", ""))

    # Model API
    openai_api_key: str = field(default_factory=lambda: os.environ.get("OPENAI_API_KEY", ""), repr=False)
    model_chat: str = field(default_factory=lambda: os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo"))
    temperature: float = field(default_factory=lambda: float(os.environ.get("OPENAI_TEMPERATURE", "0.7")))
    max_output_tokens: int = field(default_factory=lambda: int(os.environ.get("OPENAI_MAX_TOKENS", "1000")))
    llm_timeout_s: float = field(default_factory=lambda: float(os.environ.get("OPENAI_TIMEOUT_S", "60")))

    # Environment mode (development enables debug details and mock mode)
    app_env: str = field(default_factory=lambda: os.environ.get("APP_ENV", "production").strip().lower())
    mock_openai: bool = field(default_factory=lambda: _env_flag("MOCK_OPENAI"))
    mock_chunk_delay_ms: int = field(default_factory=lambda: int(os.environ.get("MOCK_CHUNK_DELAY_MS", "150")))

    # Conversation seed
    system_prompt: str = field(default_factory=lambda: os.environ.get("SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT))

    # HTTP
    allow_origins: str = field(default_factory=lambda: os.environ.get("ALLOW_ORIGINS", "http://localhost:8000"))
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper())

    @property
    def debug(self) -> bool:
        """Development mode: error bodies carry a ``details`` field."""
        return self.app_env == "development"

    @property
    def mock_mode(self) -> bool:
        """Mock streaming needs both the development env and the mock flag."""
        return self.debug and self.mock_openai

    def required_variables(self) -> List[str]:
        """Environment variables that must be set for the current mode."""
        required = list(BROKER_ENV_VARS)
        if not self.mock_mode:
            required.append("OPENAI_API_KEY")
        return required

    def validate(self) -> None:
        """Raise ConfigError naming the first missing required variable."""
        for var in self.required_variables():
            if not getattr(self, var.lower(), ""):
                raise ConfigError(f"Missing required environment variable: {var}", variable=var)

    def get_origins(self) -> List[str]:
        """CORS origins from the comma-separated setting."""
        return [o.strip() for o in self.allow_origins.split(",") if o.strip()]

    def get_llm_params(self) -> Dict[str, Any]:
        """Keyword arguments for OpenAIStreamer."""
        return {
            "model": self.model_chat,
            "temperature": self.temperature,
            "max_tokens": self.max_output_tokens,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot for the startup log; secrets shown as *** when set."""
        snapshot = {}
        for name in (f.name for f in fields(self)):
            value = getattr(self, name)
            snapshot[name] = ("***" if value else "") if name in _SECRET_FIELDS else value
        return snapshot


# Singleton instance
runtime_config = RuntimeConfig()
