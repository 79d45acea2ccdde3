"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from fruit_catcher.catch_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from fruit_catcher.catch_core.rng import Fruit

# Cell codes in the board array
CELL_EMPTY = 0
CELL_FRUIT = 1
CELL_BASKET = 2


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    The board array is (height, width) with one cell code per character cell.
    """
    fruit_x: int
    fruit_y: int
    fruit_speed_ms: int
    basket_x: int
    score: int
    ticks: int

    board: np.ndarray   # (height, width) uint8

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "fruit_x": np.array(self.fruit_x, dtype=np.int32),
            "fruit_y": np.array(self.fruit_y, dtype=np.int32),
            "fruit_speed_ms": np.array(self.fruit_speed_ms, dtype=np.int32),
            "basket_x": np.array(self.basket_x, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int32),
            "ticks": np.array(self.ticks, dtype=np.int32),
            "board": self.board,
        }


class SnapshotBuilder:
    """Builds GameSnapshot objects from game state."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._height = config.board.height
        self._width = config.board.width
        self._basket_width = config.basket.width

    def build_board(self, fruit: "Fruit", basket_x: int) -> np.ndarray:
        """Rasterize fruit and basket into a (height, width) cell array."""
        board = np.full((self._height, self._width), CELL_EMPTY, dtype=np.uint8)
        board[self._height - 1, basket_x:basket_x + self._basket_width] = CELL_BASKET
        # The fruit is drawn last so it stays visible over the basket
        board[fruit.y, fruit.x] = CELL_FRUIT
        return board

    def build(
        self,
        fruit: "Fruit",
        basket_x: int,
        score: int,
        ticks: int
    ) -> GameSnapshot:
        """Build a snapshot of the current state."""
        return GameSnapshot(
            fruit_x=fruit.x,
            fruit_y=fruit.y,
            fruit_speed_ms=fruit.speed_ms,
            basket_x=basket_x,
            score=score,
            ticks=ticks,
            board=self.build_board(fruit, basket_x),
        )
