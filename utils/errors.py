"""Errors raised while handling a single chat event."""

from __future__ import annotations


class BotFlowError(Exception):
    """Base class for errors that end the handling of one event."""


class ValidationError(BotFlowError, ValueError):
    """User input (the quality value) is malformed or out of range."""


class UnauthorizedStateError(BotFlowError):
    """A payload or action arrived while the chat is in the wrong state."""


class UnsupportedPayloadError(BotFlowError):
    """A file was sent whose declared content type is not an image."""


class TransformError(BotFlowError):
    """Downloading, decoding or re-encoding a payload failed."""


class TelegramApiError(RuntimeError):
    """The Bot API rejected a request or could not be reached."""

    def __init__(self, method: str, description: str, status_code: int | None = None) -> None:
        super().__init__(f"{method} failed: {description}")
        self.method = method
        self.description = description
        self.status_code = status_code


class ConfigError(RuntimeError):
    """Required configuration is missing or invalid."""
