"""Runtime settings read from the environment (and `.env` when present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from models.session_models import DEFAULT_QUALITY
from utils.errors import ConfigError

DEFAULT_API_BASE_URL = "https://api.telegram.org"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name}={raw!r} is not a number") from exc


@dataclass
class Settings:
    """Bot configuration.

    Attributes:
        bot_token: Bot API token (BOT_TOKEN, required).
        api_base_url: Bot API root, overridable for a local Bot API server.
        webhook_url: Public URL registered with setWebhook; polling is used when unset.
        webhook_secret: Secret token Telegram echoes in every webhook request.
        poll_timeout: Long-poll timeout in seconds for getUpdates.
        poll_error_delay: Pause in seconds after a failed getUpdates call.
        fetch_timeout: Upper bound in seconds for downloading one payload.
        transform_timeout: Upper bound in seconds for re-encoding one payload.
        default_quality: Quality a fresh session starts with.
        log_level: Root logging level name.
        host: Interface the webhook server binds to.
        port: Port the webhook server listens on.
    """

    bot_token: str
    api_base_url: str = DEFAULT_API_BASE_URL
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None
    poll_timeout: float = 30.0
    poll_error_delay: float = 3.0
    fetch_timeout: float = 30.0
    transform_timeout: float = 30.0
    default_quality: int = DEFAULT_QUALITY
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: If BOT_TOKEN is missing or a numeric value is malformed.
        """
        load_dotenv()  # Load environment variables from .env file if present

        token = os.getenv("BOT_TOKEN")
        if not token or not token.strip():
            raise ConfigError("BOT_TOKEN environment variable is not set")

        return cls(
            bot_token=token.strip(),
            api_base_url=(os.getenv("TELEGRAM_API_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
            webhook_url=os.getenv("WEBHOOK_URL") or None,
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            poll_timeout=_float_env("POLL_TIMEOUT", 30.0),
            poll_error_delay=_float_env("POLL_ERROR_DELAY", 3.0),
            fetch_timeout=_float_env("FETCH_TIMEOUT", 30.0),
            transform_timeout=_float_env("TRANSFORM_TIMEOUT", 30.0),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
            host=os.getenv("HOST") or "0.0.0.0",
            port=int(_float_env("PORT", 8000)),
        )
