"""Session domain models for the compression conversation flow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_QUALITY = 70


class FlowState(str, Enum):
	"""Position of a chat within the compression flow."""

	IDLE = "idle"
	AWAITING_QUALITY = "awaiting_quality"
	AWAITING_IMAGE = "awaiting_image"


@dataclass
class ChatSession:
	"""In-memory state tracked for one chat."""

	chat_id: int
	state: FlowState = FlowState.IDLE
	quality: int = DEFAULT_QUALITY
	count: int = 0

	@property
	def awaiting_quality(self) -> bool:
		return self.state is FlowState.AWAITING_QUALITY

	@property
	def awaiting_image(self) -> bool:
		return self.state is FlowState.AWAITING_IMAGE

	def reset(self, default_quality: int = DEFAULT_QUALITY) -> None:
		"""Return the session to its initial idle values."""
		self.state = FlowState.IDLE
		self.quality = default_quality
		self.count = 0
