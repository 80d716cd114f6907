"""Selectable actions attached to outbound messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

ACTION_COMPRESS = "COMPRESS"
ACTION_COMPRESS_DONE = "COMPRESS_DONE"
ACTION_RESTART = "RESTART"


@dataclass(frozen=True)
class ActionButton:
    """One selectable control: the label shown and the token sent back."""

    label: str
    token: str


Keyboard = Sequence[Sequence[ActionButton]]


def single_action(label: str, token: str) -> List[List[ActionButton]]:
    """Return a keyboard holding one button on one row."""
    return [[ActionButton(label=label, token=token)]]


def inline_markup(keyboard: Optional[Keyboard]) -> Optional[Dict[str, Any]]:
    """Render keyboard rows as a Bot API `inline_keyboard` reply markup."""
    if not keyboard:
        return None
    return {
        "inline_keyboard": [
            [{"text": button.label, "callback_data": button.token} for button in row]
            for row in keyboard
        ]
    }


def start_keyboard() -> List[List[ActionButton]]:
    return single_action("📷 Compress Images", ACTION_COMPRESS)


def done_keyboard() -> List[List[ActionButton]]:
    return single_action("✅ Done", ACTION_COMPRESS_DONE)


def restart_keyboard() -> List[List[ActionButton]]:
    return single_action("🔄 Start Over", ACTION_RESTART)
