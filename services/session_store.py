"""Simple in-memory store for per-chat conversation sessions."""

from __future__ import annotations

import asyncio
from typing import Dict

from models.session_models import DEFAULT_QUALITY, ChatSession


class SessionStore:
	"""Map chat identities to their mutable session state.

	Sessions live for the lifetime of the process only. Each chat also gets an
	`asyncio.Lock` so that events for the same chat are handled one at a time
	while different chats proceed independently.
	"""

	def __init__(self, default_quality: int = DEFAULT_QUALITY) -> None:
		self.default_quality = default_quality
		self._sessions: Dict[int, ChatSession] = {}
		self._locks: Dict[int, asyncio.Lock] = {}

	def get_or_create(self, chat_id: int) -> ChatSession:
		"""Return the chat's session, creating a default one on first contact."""
		session = self._sessions.get(chat_id)
		if session is None:
			session = ChatSession(chat_id=chat_id, quality=self.default_quality)
			self._sessions[chat_id] = session
		return session

	def reset(self, chat_id: int) -> ChatSession:
		"""Overwrite the chat's session with defaults and return it."""
		session = self.get_or_create(chat_id)
		session.reset(self.default_quality)
		return session

	def lock(self, chat_id: int) -> asyncio.Lock:
		"""Return the lock serializing event handling for one chat."""
		lock = self._locks.get(chat_id)
		if lock is None:
			lock = asyncio.Lock()
			self._locks[chat_id] = lock
		return lock

	def __contains__(self, chat_id: object) -> bool:
		return chat_id in self._sessions

	def __len__(self) -> int:
		return len(self._sessions)
