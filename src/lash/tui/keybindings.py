"""Editor keybindings manager."""

from __future__ import annotations

import logging
from typing import Literal, get_args

from lash.tui.keys import KeyId, matches_key

logger = logging.getLogger(__name__)

EditorAction = Literal[
    "submit",
    "deleteCharBackward",
    "deleteCharForward",
    "complete",
    "historyPrevious",
    "historyNext",
    "cursorLeft",
    "cursorRight",
    "endOfInput",
]

EDITOR_ACTIONS: frozenset[str] = frozenset(get_args(EditorAction))

EditorKeybindingsConfig = dict[str, KeyId | list[KeyId]]

DEFAULT_EDITOR_KEYBINDINGS: dict[EditorAction, KeyId | list[KeyId]] = {
    "submit": "enter",
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "complete": "tab",
    "historyPrevious": "up",
    "historyNext": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "endOfInput": "ctrl+d",
}

# Order in which actions are tried for one input event
ACTION_PRIORITY: tuple[EditorAction, ...] = (
    "submit",
    "deleteCharBackward",
    "deleteCharForward",
    "complete",
    "historyPrevious",
    "historyNext",
    "cursorLeft",
    "cursorRight",
    "endOfInput",
)


class EditorKeybindingsManager:
    """Manages keybindings for the line editor."""

    def __init__(self, config: EditorKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[str, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: EditorKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_EDITOR_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            if action not in EDITOR_ACTIONS:
                logger.warning("Ignoring keybinding for unknown action %r", action)
                continue
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: EditorAction) -> bool:
        """Check if input matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return any(matches_key(data, key) for key in keys)

    def resolve(self, data: str) -> EditorAction | None:
        """Return the highest-priority action bound to *data*, if any."""
        for action in ACTION_PRIORITY:
            if self.matches(data, action):
                return action
        return None
