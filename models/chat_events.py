"""Typed inbound chat events parsed from Telegram Bot API updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class StartCommand:
    chat_id: int


@dataclass(frozen=True)
class ActionSelected:
    """A tap on an inline button; `callback_id` must be acknowledged."""

    chat_id: int
    token: str
    callback_id: str


@dataclass(frozen=True)
class TextMessage:
    chat_id: int
    text: str


@dataclass(frozen=True)
class PhotoMessage:
    """An inline photo; `file_id` refers to the largest available size."""

    chat_id: int
    file_id: str


@dataclass(frozen=True)
class DocumentMessage:
    """A generic file together with its declared content type."""

    chat_id: int
    file_id: str
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class OtherMessage:
    """Any message the flow has no dedicated rule for (stickers, voice, ...)."""

    chat_id: int


ChatEvent = Union[StartCommand, ActionSelected, TextMessage, PhotoMessage, DocumentMessage, OtherMessage]


def _is_start_command(text: str) -> bool:
    stripped = text.strip()
    if not stripped.startswith("/"):
        return False
    command = stripped.split(maxsplit=1)[0][1:]
    return command.split("@", 1)[0].lower() == "start"


def _parse_message(message: Dict[str, Any]) -> Optional[ChatEvent]:
    chat = message.get("chat") or {}
    chat_id = chat.get("id")
    if chat_id is None:
        return None

    text = message.get("text")
    if isinstance(text, str):
        if _is_start_command(text):
            return StartCommand(chat_id=chat_id)
        return TextMessage(chat_id=chat_id, text=text)

    photos = message.get("photo")
    if photos:
        # Telegram lists the available sizes smallest first
        return PhotoMessage(chat_id=chat_id, file_id=photos[-1]["file_id"])

    document = message.get("document")
    if document:
        return DocumentMessage(
            chat_id=chat_id,
            file_id=document["file_id"],
            mime_type=document.get("mime_type"),
        )

    return OtherMessage(chat_id=chat_id)


def _parse_callback(query: Dict[str, Any]) -> Optional[ChatEvent]:
    message = query.get("message") or {}
    chat_id = (message.get("chat") or {}).get("id")
    if chat_id is None:
        chat_id = (query.get("from") or {}).get("id")
    if chat_id is None:
        return None
    return ActionSelected(chat_id=chat_id, token=query.get("data") or "", callback_id=str(query["id"]))


def parse_update(update: Dict[str, Any]) -> Optional[ChatEvent]:
    """Convert a raw update into a chat event.

    Args:
        update: Decoded JSON update as delivered by `getUpdates` or a webhook.

    Returns:
        The matching event, or None for update kinds the bot does not handle
        (edited messages, channel posts, inline queries, ...).
    """
    if "callback_query" in update:
        return _parse_callback(update["callback_query"])
    if "message" in update:
        return _parse_message(update["message"])
    return None
