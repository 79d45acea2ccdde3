"""
Controls
========

Maps raw key names from a Display to game actions.

Key names follow curses' getkey() convention: printable keys are the
character itself ("a", "q"), special keys are their curses name
("KEY_LEFT", "KEY_RIGHT"). A read that timed out is None.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from fruit_catcher.catch_core.config_loader import GameConfig, get_config


class Action(Enum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    QUIT = 3
    REPLAY = 4


class KeyMap:
    """Lookup table from key name to Action, built from the controls config."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        controls = config.controls
        self._bindings: Dict[str, Action] = {}
        for action, keys in (
            (Action.LEFT, controls.left),
            (Action.RIGHT, controls.right),
            (Action.QUIT, controls.quit),
            (Action.REPLAY, controls.replay),
        ):
            for key in keys:
                self._bindings[key] = action

    def action_for(self, key: Optional[str]) -> Action:
        """Return the action bound to key, or Action.NONE."""
        if key is None:
            return Action.NONE
        return self._bindings.get(key, Action.NONE)

    def keys_for(self, action: Action) -> list:
        """All keys bound to an action, in config order."""
        return [k for k, a in self._bindings.items() if a is action]

    def __contains__(self, key: str) -> bool:
        return key in self._bindings
