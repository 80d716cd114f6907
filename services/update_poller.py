"""Long-polling loop feeding Bot API updates to the conversation controller."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from controllers.conversation_controller import ConversationController
from models.chat_events import parse_update
from services.telegram_client import TelegramClient
from utils.errors import TelegramApiError

LOGGER = logging.getLogger(__name__)


class UpdatePoller:
	"""Poll `getUpdates` and dispatch each update as its own task.

	Updates for different chats run concurrently; the controller's per-chat
	lock keeps events from the same chat in arrival order.
	"""

	def __init__(
		self,
		client: TelegramClient,
		controller: ConversationController,
		poll_timeout: float = 30.0,
		error_delay: float = 3.0,
	) -> None:
		self.client = client
		self.controller = controller
		self.poll_timeout = poll_timeout
		self.error_delay = error_delay
		self.offset: Optional[int] = None
		self._stopping = asyncio.Event()
		self._tasks: Set[asyncio.Task] = set()

	def stop(self) -> None:
		"""Ask the loop to exit after the current poll returns."""
		self._stopping.set()

	async def run(self) -> None:
		"""Poll until `stop()` is called, then wait for in-flight handlers."""
		LOGGER.info("Bot started (polling)")
		while not self._stopping.is_set():
			try:
				await self.poll_once()
			except TelegramApiError as exc:
				LOGGER.error("Polling failed: %s", exc)
				try:
					await asyncio.wait_for(self._stopping.wait(), timeout=self.error_delay)
				except asyncio.TimeoutError:
					pass
		if self._tasks:
			await asyncio.gather(*self._tasks, return_exceptions=True)
		LOGGER.info("Polling stopped")

	async def poll_once(self) -> int:
		"""Fetch one batch of updates, schedule their handlers, and return the batch size."""
		updates = await self.client.get_updates(offset=self.offset, timeout=self.poll_timeout)
		for update in updates:
			self.offset = int(update["update_id"]) + 1
			self.dispatch(update)
		return len(updates)

	def dispatch(self, update: Dict[str, Any]) -> Optional[asyncio.Task]:
		"""Schedule handling of one raw update; unsupported updates are skipped."""
		event = parse_update(update)
		if event is None:
			LOGGER.debug("Skipping unsupported update %s", update.get("update_id"))
			return None
		task = asyncio.create_task(self.controller.handle(event))
		self._tasks.add(task)
		task.add_done_callback(self._on_task_done)
		return task

	def _on_task_done(self, task: asyncio.Task) -> None:
		self._tasks.discard(task)
		if task.cancelled():
			return
		exc = task.exception()
		if exc is not None:
			LOGGER.error("Unhandled error while handling update", exc_info=exc)
