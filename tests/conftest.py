"""
Shared fixtures for bot tests.

Provides an in-memory transport that records every outbound call and a
stub compressor, so the conversation flow can be exercised without the
Bot API or real image encoding.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from controllers.conversation_controller import ConversationController
from services.session_store import SessionStore
from services.transform_adapter import TransformAdapter
from utils.errors import TelegramApiError, TransformError


class RecordingTransport:
    """ChatTransport double: stores sent messages and serves canned files."""

    def __init__(self) -> None:
        self.texts: List[Dict[str, Any]] = []
        self.photos: List[Dict[str, Any]] = []
        self.acks: List[str] = []
        self.calls: List[str] = []
        self.files: Dict[str, bytes] = {}
        self.fail_fetch = False
        self.fail_send_photo = False

    async def send_text(self, chat_id, text, keyboard=None) -> None:
        self.calls.append("send_text")
        self.texts.append({"chat_id": chat_id, "text": text, "keyboard": keyboard})

    async def send_photo(self, chat_id, data, caption, keyboard=None) -> None:
        self.calls.append("send_photo")
        if self.fail_send_photo:
            raise TelegramApiError("sendPhoto", "Bad Request: PHOTO_INVALID_DIMENSIONS", 400)
        self.photos.append({"chat_id": chat_id, "data": data, "caption": caption, "keyboard": keyboard})

    async def answer_action(self, callback_id) -> None:
        self.calls.append("answer_action")
        self.acks.append(callback_id)

    async def fetch_file(self, file_id) -> bytes:
        if self.fail_fetch:
            raise TelegramApiError("getFile", "Bad Request: file is too big", 400)
        return self.files[file_id]

    @property
    def last_text(self) -> Optional[str]:
        return self.texts[-1]["text"] if self.texts else None


class StubCompressor:
    """Return a payload of a configured size instead of encoding."""

    def __init__(self, output_size: Optional[int] = None, ratio: float = 0.4) -> None:
        self.output_size = output_size
        self.ratio = ratio
        self.fail = False
        self.calls: List[int] = []

    def compress(self, data: bytes, quality: int) -> bytes:
        self.calls.append(quality)
        if self.fail:
            raise TransformError("Payload is not a supported image format")
        size = self.output_size if self.output_size is not None else int(len(data) * self.ratio)
        return b"\xff" * size


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def compressor() -> StubCompressor:
    return StubCompressor()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def controller(store, transport, compressor) -> ConversationController:
    transformer = TransformAdapter(transport, compressor, fetch_timeout=1.0, transform_timeout=1.0)
    return ConversationController(store, transport, transformer)
