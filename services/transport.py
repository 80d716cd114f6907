"""Contract between the conversation controller and the chat transport."""

from __future__ import annotations

from typing import Optional, Protocol

from models.keyboards import Keyboard


class ChatTransport(Protocol):
    """Outbound operations the controller needs from a messaging backend."""

    async def send_text(self, chat_id: int, text: str, keyboard: Optional[Keyboard] = None) -> None:
        """Send a text reply, optionally with selectable actions."""

    async def send_photo(
        self, chat_id: int, data: bytes, caption: str, keyboard: Optional[Keyboard] = None
    ) -> None:
        """Send an image back to the chat with a caption."""

    async def answer_action(self, callback_id: str) -> None:
        """Acknowledge an action selection so the client stops its spinner."""

    async def fetch_file(self, file_id: str) -> bytes:
        """Resolve a file reference and download its bytes."""
