"""
Game Rules
==========

Handles basket movement, the catch test and the per-tick fruit update.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from fruit_catcher.catch_core.config_loader import GameConfig, get_config
from fruit_catcher.catch_core.rng import Fruit, FruitSpawner


@dataclass
class TickOutcome:
    """Result of advancing the fruit by one tick."""
    fruit: Fruit
    score: int
    game_over: bool
    caught: bool = False
    missed: bool = False

    @property
    def respawned(self) -> bool:
        """True if the fruit reached the basket row and was replaced."""
        return self.caught or self.missed


class BasketRules:
    """
    Handles basket movement.

    The basket is a span of columns [x, x + width). Every move is clamped
    so the span stays on the board.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize basket rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._step = config.basket.move_step
        self._max_x = config.max_basket_x

    @property
    def start_x(self) -> int:
        """Basket position at the start of a game."""
        return self._config.basket_start_x

    @property
    def max_x(self) -> int:
        """Rightmost legal basket position."""
        return self._max_x

    def clamp(self, x: int) -> int:
        """Clamp a basket position to [0, board.width - basket.width]."""
        return max(0, min(self._max_x, x))

    def move_left(self, x: int) -> int:
        return self.clamp(x - self._step)

    def move_right(self, x: int) -> int:
        return self.clamp(x + self._step)


class CatchRules:
    """Decides whether a fruit on the basket row lands in the basket."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._basket_width = config.basket.width
        self._last_row = config.board.last_row

    def is_at_basket_row(self, fruit: Fruit) -> bool:
        return fruit.y == self._last_row

    def is_caught(self, fruit_x: int, basket_x: int) -> bool:
        """True if fruit_x lies within [basket_x, basket_x + basket.width)."""
        return basket_x <= fruit_x < basket_x + self._basket_width


def advance_tick(
    fruit: Fruit,
    basket_x: int,
    score: int,
    game_over: bool,
    spawner: FruitSpawner,
    rules: Optional[CatchRules] = None
) -> TickOutcome:
    """
    Advance the fruit by one tick.

    On the basket row the fruit is either caught (score + 1) or missed
    (game over), and in both cases a new fruit is spawned at row 0.
    Anywhere else the fruit moves down one row.

    Args:
        fruit: Current fruit. Not modified.
        basket_x: Leftmost basket column.
        score: Score before this tick.
        game_over: Game-over flag before this tick. Kept set once set.
        spawner: Source of the replacement fruit.
        rules: Catch rules. Built from the spawner's config if None.

    Returns:
        TickOutcome with the new fruit, score and game-over flag.
    """
    if rules is None:
        rules = CatchRules(spawner.config)

    if rules.is_at_basket_row(fruit):
        caught = rules.is_caught(fruit.x, basket_x)
        return TickOutcome(
            fruit=spawner.spawn(),
            score=score + 1 if caught else score,
            game_over=game_over or not caught,
            caught=caught,
            missed=not caught
        )

    return TickOutcome(
        fruit=replace(fruit, y=fruit.y + 1),
        score=score,
        game_over=game_over
    )
