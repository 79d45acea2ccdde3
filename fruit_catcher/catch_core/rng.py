"""
RNG - Fruit Spawner
===================

Provides seeded fruit spawning: a uniform column across the board and a
uniform tick delay in the configured speed range.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from fruit_catcher.catch_core.config_loader import GameConfig, get_config


@dataclass
class Fruit:
    """The falling fruit."""
    x: int          # Column index
    y: int          # Row index, 0 at the top
    speed_ms: int   # Milliseconds per tick while this fruit falls


class FruitSpawner:
    """
    Seeded source of new fruits.

    Every spawn draws the column first and the speed second, so a given
    seed always yields the same sequence of fruits.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            rng: Shared random source. Takes precedence over seed.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else random.Random(seed)
        self._spawned: int = 0

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def spawned(self) -> int:
        """Number of fruits spawned since the last reset."""
        return self._spawned

    def spawn(self) -> Fruit:
        """Create a fruit at row 0 with a random column and speed."""
        x = self._rng.randrange(self._config.board.width)
        speed_ms = self._rng.randrange(
            self._config.fruit.min_speed_ms,
            self._config.fruit.max_speed_ms
        )
        self._spawned += 1
        return Fruit(x=x, y=0, speed_ms=speed_ms)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawn counter, reseeding when a seed is given.

        Args:
            seed: New random seed. Keeps the current random state if None.
        """
        if seed is not None:
            self._rng.seed(seed)
        self._spawned = 0
