"""Conversation state machine driving the compression flow for each chat."""

from __future__ import annotations

import logging

from models.chat_events import (
    ActionSelected,
    ChatEvent,
    DocumentMessage,
    PhotoMessage,
    StartCommand,
    TextMessage,
)
from models.keyboards import (
    ACTION_COMPRESS,
    ACTION_COMPRESS_DONE,
    ACTION_RESTART,
    done_keyboard,
    restart_keyboard,
    start_keyboard,
)
from models.session_models import ChatSession, FlowState
from services import bot_messages
from services.session_store import SessionStore
from services.transform_adapter import TransformAdapter
from services.transport import ChatTransport
from utils.errors import (
    TelegramApiError,
    TransformError,
    UnauthorizedStateError,
    UnsupportedPayloadError,
    ValidationError,
)
from utils.media_validation import is_image_mime, parse_quality

LOGGER = logging.getLogger(__name__)


class ConversationController:
    """Interpret inbound chat events against the chat's session.

    One event is handled at a time per chat (guarded by the store's per-chat
    lock). Errors raised while handling an event are turned into replies or
    log entries here and never propagate to the caller.
    """

    def __init__(self, store: SessionStore, transport: ChatTransport, transformer: TransformAdapter) -> None:
        self.store = store
        self.transport = transport
        self.transformer = transformer

    async def handle(self, event: ChatEvent) -> None:
        """Process a single inbound event for its chat."""
        async with self.store.lock(event.chat_id):
            session = self.store.get_or_create(event.chat_id)
            try:
                await self._dispatch(event, session)
            except TelegramApiError as exc:
                LOGGER.error("Transport error while handling %s for chat %s: %s", type(event).__name__, event.chat_id, exc)

    async def _dispatch(self, event: ChatEvent, session: ChatSession) -> None:
        if isinstance(event, StartCommand):
            await self._send_start_menu(session)
        elif isinstance(event, ActionSelected):
            await self._on_action(event, session)
        elif isinstance(event, TextMessage) and session.awaiting_quality:
            await self._on_quality_text(event, session)
        elif isinstance(event, (PhotoMessage, DocumentMessage)):
            await self._on_payload(event, session)
        else:
            await self._fallback(session)

    async def _send_start_menu(self, session: ChatSession) -> None:
        self.store.reset(session.chat_id)
        await self.transport.send_text(session.chat_id, bot_messages.welcome_text(), start_keyboard())

    async def _on_action(self, event: ActionSelected, session: ChatSession) -> None:
        try:
            await self.transport.answer_action(event.callback_id)
        except TelegramApiError as exc:
            LOGGER.warning("Could not acknowledge action %s for chat %s: %s", event.token, event.chat_id, exc)

        if event.token == ACTION_COMPRESS:
            session.state = FlowState.AWAITING_QUALITY
            await self.transport.send_text(session.chat_id, bot_messages.quality_prompt_text())
        elif event.token == ACTION_COMPRESS_DONE:
            # count survives until the next restart
            total = session.count
            session.state = FlowState.IDLE
            await self.transport.send_text(session.chat_id, bot_messages.done_summary_text(total), restart_keyboard())
        elif event.token == ACTION_RESTART:
            await self._send_start_menu(session)
        else:
            LOGGER.warning("Ignoring unknown action %r from chat %s", event.token, event.chat_id)

    async def _on_quality_text(self, event: TextMessage, session: ChatSession) -> None:
        try:
            quality = parse_quality(event.text)
        except ValidationError as exc:
            LOGGER.debug("Rejected quality input from chat %s: %s", event.chat_id, exc)
            await self.transport.send_text(session.chat_id, bot_messages.invalid_quality_text())
            return

        session.quality = quality
        session.state = FlowState.AWAITING_IMAGE
        await self.transport.send_text(session.chat_id, bot_messages.quality_set_text(quality))

    def _resolve_file_id(self, event: PhotoMessage | DocumentMessage, session: ChatSession) -> str:
        """Return the file reference to compress.

        Raises:
            UnauthorizedStateError: If the chat has not reached the image step.
            UnsupportedPayloadError: If a document does not declare an image type.
        """
        if not session.awaiting_image:
            raise UnauthorizedStateError(f"Chat {session.chat_id} sent a payload in state {session.state.value}")
        if isinstance(event, DocumentMessage) and not is_image_mime(event.mime_type):
            raise UnsupportedPayloadError(f"Document type {event.mime_type!r} is not an image")
        return event.file_id

    async def _on_payload(self, event: PhotoMessage | DocumentMessage, session: ChatSession) -> None:
        try:
            file_id = self._resolve_file_id(event, session)
        except UnauthorizedStateError:
            await self.transport.send_text(session.chat_id, bot_messages.not_ready_text())
            return
        except UnsupportedPayloadError as exc:
            LOGGER.info("Chat %s: %s", session.chat_id, exc)
            await self.transport.send_text(session.chat_id, bot_messages.unsupported_payload_text())
            return

        try:
            result = await self.transformer.transform(file_id, session.quality)
        except TransformError as exc:
            LOGGER.error("Compression error for chat %s: %s", session.chat_id, exc)
            await self.transport.send_text(session.chat_id, bot_messages.transform_failed_text())
            return

        session.count += 1
        caption = bot_messages.compression_caption(result, session.count)
        try:
            await self.transport.send_photo(session.chat_id, result.data, caption, done_keyboard())
        except TelegramApiError as exc:
            LOGGER.error("Could not deliver compressed image to chat %s: %s", session.chat_id, exc)
            await self.transport.send_text(session.chat_id, bot_messages.transform_failed_text())

    async def _fallback(self, session: ChatSession) -> None:
        if session.state is FlowState.IDLE:
            await self.transport.send_text(session.chat_id, bot_messages.use_start_text())
