"""
Core Game
=========

Main game orchestrator combining the spawner, basket and catch rules,
and scoring.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Dict, Any

from fruit_catcher.catch_core.config_loader import GameConfig, get_config
from fruit_catcher.catch_core.controls import Action
from fruit_catcher.catch_core.rng import Fruit, FruitSpawner
from fruit_catcher.catch_core.rules import BasketRules, CatchRules, advance_tick
from fruit_catcher.catch_core.scoring import ScoreEvent, ScoreTracker
from fruit_catcher.catch_core.state_snapshot import SnapshotBuilder, GameSnapshot

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single game tick."""
    fruit: Fruit
    caught: bool
    missed: bool
    delta_score: int
    terminated: bool
    event: Optional[ScoreEvent] = None


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Fruit spawner (RNG)
    - Basket movement
    - Catch detection
    - Scoring

    One tick = the fruit moves down one row, or is resolved against the
    basket on the last row and respawned.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        high_score: int = 0
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            rng: Shared random source (a session's). Takes precedence over seed.
            high_score: Persisted high score to display and measure against.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        # Initialize subsystems
        self._spawner = FruitSpawner(config, seed=seed, rng=rng)
        self._basket_rules = BasketRules(config)
        self._catch_rules = CatchRules(config)
        self._scorer = ScoreTracker(high_score)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._fruit: Fruit = self._spawner.spawn()
        self._basket_x: int = self._basket_rules.start_x
        self._ticks: int = 0
        self._terminated: bool = False
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def fruit(self) -> Fruit:
        """The falling fruit."""
        return self._fruit

    @property
    def basket_x(self) -> int:
        """Leftmost basket column."""
        return self._basket_x

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def high_score(self) -> int:
        """High score known to this game."""
        return self._scorer.high_score

    @property
    def ticks(self) -> int:
        """Ticks elapsed since reset."""
        return self._ticks

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._terminated

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset game to initial state. The high score is kept.

        Args:
            seed: New random seed. Keeps the current random state if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed

        self._spawner.reset(seed)
        self._scorer.reset()

        self._fruit = self._spawner.spawn()
        self._basket_x = self._basket_rules.start_x
        self._ticks = 0
        self._terminated = False
        self._termination_reason = ""

        return self.snapshot()

    def move_basket(self, action: Action) -> int:
        """
        Move the basket one step left or right, clamped to the board.

        Returns:
            New basket position.
        """
        if action is Action.LEFT:
            self._basket_x = self._basket_rules.move_left(self._basket_x)
        elif action is Action.RIGHT:
            self._basket_x = self._basket_rules.move_right(self._basket_x)
        return self._basket_x

    def apply_action(self, action: Action) -> None:
        """Apply a movement action. Other actions are handled by the caller."""
        if self.is_over:
            return
        self.move_basket(action)

    def advance_tick(self) -> TickResult:
        """
        Execute one tick.

        Returns:
            TickResult describing what happened to the fruit.
        """
        if self.is_over:
            # Game already ended, return current state
            return TickResult(
                fruit=self._fruit,
                caught=False,
                missed=False,
                delta_score=0,
                terminated=True
            )

        self._ticks += 1
        outcome = advance_tick(
            self._fruit,
            self._basket_x,
            self._scorer.score,
            self._terminated,
            self._spawner,
            self._catch_rules
        )
        self._fruit = outcome.fruit

        event = None
        if outcome.caught:
            event = self._scorer.apply_catch(self._ticks)
            logger.debug("Caught fruit at tick %d, score %d", self._ticks, self._scorer.score)

        if outcome.game_over:
            self._terminated = True
            self._termination_reason = "missed"
            logger.debug("Missed fruit at tick %d, final score %d", self._ticks, self._scorer.score)

        return TickResult(
            fruit=self._fruit,
            caught=outcome.caught,
            missed=outcome.missed,
            delta_score=event.points if event is not None else 0,
            terminated=self._terminated,
            event=event
        )

    def commit_high_score(self) -> bool:
        """Raise the high score if this game's score beat it."""
        return self._scorer.commit_high_score()

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            fruit=self._fruit,
            basket_x=self._basket_x,
            score=self._scorer.score,
            ticks=self._ticks
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "high_score": self._scorer.high_score,
            "catches": self._scorer.catches,
            "ticks": self._ticks,
            "fruit_speed_ms": self._fruit.speed_ms,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with fruit, basket and score info.
        """
        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "fruit_x": self._fruit.x,
            "fruit_y": self._fruit.y,
            "basket_x": self._basket_x,
            "basket_width": self._config.basket.width,
            "score": self._scorer.score,
            "high_score": self._scorer.high_score,
        }
