"""
Text Renderer
=============

Draws the playfield and the menu screens onto a Display.

Screen layout on the default 30x15 board:

    rows 0-14   playfield (basket on row 14) or menu/game-over text
    row  15     Score
    row  16     High Score
    row  17     controls help
    rows 18-21  credits (game-over screen only)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple

from fruit_catcher.catch_core.config_loader import GameConfig, get_config
from fruit_catcher.catch_core.display import Display
from fruit_catcher.catch_core.leaderboard import LeaderboardEntry


def _key_label(key: str) -> str:
    """Human label for a key name: "KEY_LEFT" -> "LEFT"."""
    if key.startswith("KEY_"):
        return key[4:]
    return key


class TextRenderer:
    """
    Stateless renderer for the character grid.

    Every draw_* call clears the display, draws one screen and refreshes,
    except the partial overlays (draw_name_prompt, draw_replay_prompt),
    which draw on top of the current screen.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._width = config.board.width
        self._height = config.board.height
        self._mid = config.board.height // 2
        self._fruit_glyph = config.fruit.glyph
        self._basket_glyph = config.basket.glyph
        self._help_text = self._build_help_text()

    def _build_help_text(self) -> str:
        controls = self._config.controls
        parts = []
        for keys, label in (
            (controls.left, "left"),
            (controls.right, "right"),
            (controls.quit, "quit"),
        ):
            names = "/".join(f"'{_key_label(k)}'" for k in keys)
            parts.append(f"{names} ({label})")
        return "Controls: " + ", ".join(parts)

    def centered_col(self, text: str) -> int:
        """Column that centres text on the board, never negative."""
        return max(0, (self._width - len(text)) // 2)

    def _write_centered(self, display: Display, row: int, text: str) -> None:
        display.write(row, self.centered_col(text), text)

    # -------------------------------------------------------------------------
    # Rows shared between screens
    # -------------------------------------------------------------------------

    @property
    def prompt_row(self) -> int:
        """Row of the name prompt and the replay prompt."""
        return self._mid + 5

    @property
    def credits_row(self) -> int:
        """First row below the grid and its info lines."""
        return self._config.screen_rows

    @property
    def screen_size(self) -> Tuple[int, int]:
        """(rows, cols) a display needs to show every screen in full."""
        rows = self.credits_row + 1 + len(self._config.credits)
        cols = max(self._width, len(self._help_text), 48)
        return rows, cols

    # -------------------------------------------------------------------------
    # Screens
    # -------------------------------------------------------------------------

    def draw_playfield(self, display: Display, render_data: Dict[str, Any]) -> None:
        """Draw fruit, basket and the score lines."""
        display.clear()

        display.write(render_data["fruit_y"], render_data["fruit_x"], self._fruit_glyph)

        basket_row = self._height - 1
        basket_x = render_data["basket_x"]
        for i in range(render_data["basket_width"]):
            display.write(basket_row, basket_x + i, self._basket_glyph)

        display.write(self._height, 0, f"Score: {render_data['score']}")
        display.write(self._height + 1, 0, f"High Score: {render_data['high_score']}")
        display.write(self._height + 2, 0, self._help_text)
        display.refresh()

    def draw_menu(self, display: Display) -> None:
        """Title banner shown once at startup."""
        display.clear()
        self._write_centered(display, self._mid - 5, "CATCH")
        self._write_centered(display, self._mid - 3, "THE")
        self._write_centered(display, self._mid - 1, "FRUIT")
        self._write_centered(display, self._mid + 3, "Press any key to enter")
        display.refresh()

    def draw_game_over(
        self,
        display: Display,
        score: int,
        high_score: int,
        qualifies: bool
    ) -> None:
        """Game-over summary, with the top-N notice when the score qualifies."""
        display.clear()
        self._write_centered(display, self._mid - 2, "GAME OVER")
        self._write_centered(display, self._mid, f"Your final score: {score}")
        self._write_centered(display, self._mid + 1, f"High Score: {high_score}")

        if qualifies:
            capacity = self._config.leaderboard.capacity
            self._write_centered(
                display, self._mid + 2, f"Congratulations! You're in the top {capacity}!"
            )
            self._write_centered(display, self._mid + 4, "Enter your name and press Enter:")

        if self._config.credits:
            display.write(self.credits_row, 0, "Credits:")
            for i, name in enumerate(self._config.credits, start=1):
                display.write(self.credits_row + i, 0, name)

        display.refresh()

    def draw_name_prompt(self, display: Display) -> Tuple[int, int]:
        """
        Draw the name prompt over the game-over screen.

        Returns:
            (row, col) where typed text should be echoed.
        """
        label = "Enter your name: "
        col = self.centered_col(label + " " * self._config.leaderboard.max_name_length)
        display.write(self.prompt_row, col, label)
        display.refresh()
        return self.prompt_row, col + len(label)

    def draw_leaderboard(self, display: Display, entries: Iterable[LeaderboardEntry]) -> None:
        """One "name - score" line per entry, from row 2."""
        display.clear()
        entries = list(entries)
        self._write_centered(display, 0, "LEADERBOARD")

        if not entries:
            self._write_centered(display, 2, "No leaderboard data available.")
        else:
            lines = [str(entry) for entry in entries]
            col = self.centered_col(max(lines, key=len))
            for row, line in enumerate(lines, start=2):
                display.write(row, col, line)

        display.refresh()

    def draw_replay_prompt(self, display: Display) -> None:
        """Replay/quit prompt drawn over the current screen."""
        replay = _key_label(self._config.controls.replay[0])
        quit_key = _key_label(self._config.controls.quit[0])
        self._write_centered(
            display,
            self.prompt_row,
            f"Press '{replay}' to play again or '{quit_key}' to quit."
        )
        display.refresh()
