"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the catch game.
Reward is the number of points gained on the step (1 per catch).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from fruit_catcher.catch_core.config_loader import GameConfig, load_config
from fruit_catcher.catch_core.controls import Action
from fruit_catcher.catch_core.display import GridDisplay
from fruit_catcher.catch_core.game import CoreGame
from fruit_catcher.catch_core.render_text import TextRenderer
from fruit_catcher.catch_core.state_snapshot import CELL_BASKET, GameSnapshot

logger = logging.getLogger(__name__)

# Discrete action index -> game action
ACTIONS = (Action.NONE, Action.LEFT, Action.RIGHT)


class CatchFruitEnv(gym.Env):
    """
    Catch-the-fruit game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move left, 2 = move right.
        The basket moves first, then the fruit advances one tick.

    Observation Space:
        Dict of int32 scalars (fruit_x, fruit_y, fruit_speed_ms, basket_x,
        score, ticks) and a (height, width) uint8 board of cell codes.

    Reward:
        1.0 on a catch, 0.0 otherwise.

    Termination:
        terminated on a miss; truncated after caps.max_ticks ticks.
    """

    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 4,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already loaded configuration. Takes precedence over config_path.
            render_mode: "ansi" for a text frame, None for headless.
            debug: If True, logs every step at DEBUG level.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = config if config is not None else load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug

        self._game = CoreGame(config=self._config)
        self._max_ticks = self._config.caps.max_ticks

        # Text rendering (lazy)
        self._renderer: Optional[TextRenderer] = None
        self._grid: Optional[GridDisplay] = None

        self.action_space = spaces.Discrete(len(ACTIONS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            logger.debug(
                "CatchFruitEnv initialized: board %dx%d, basket %d",
                self._config.board.width, self._config.board.height, self._config.basket.width
            )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        board = self._config.board
        fruit = self._config.fruit
        int_max = np.iinfo(np.int32).max

        def scalar(low: int, high: int) -> spaces.Box:
            return spaces.Box(low=low, high=high, shape=(), dtype=np.int32)

        return spaces.Dict({
            "fruit_x": scalar(0, board.width - 1),
            "fruit_y": scalar(0, board.height - 1),
            "fruit_speed_ms": scalar(fruit.min_speed_ms, fruit.max_speed_ms - 1),
            "basket_x": scalar(0, self._config.max_basket_x),
            "score": scalar(0, int_max),
            "ticks": scalar(0, int_max),
            "board": spaces.Box(
                low=0,
                high=CELL_BASKET,
                shape=(board.height, board.width),
                dtype=np.uint8
            ),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: Index into ACTIONS.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action: {action}")

        self._game.apply_action(ACTIONS[action])
        result = self._game.advance_tick()

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = float(result.delta_score)
        terminated = result.terminated
        truncated = not terminated and self._game.ticks >= self._max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["caught"] = result.caught
        info["missed"] = result.missed

        if self._debug:
            logger.debug(
                "Step: action=%s, fruit=(%d,%d), basket=%d, reward=%.1f",
                ACTIONS[action].name, result.fruit.x, result.fruit.y,
                self._game.basket_x, reward
            )
            if terminated:
                logger.debug("TERMINATED: %s", info.get("terminated_reason", "unknown"))

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def render(self) -> Optional[str]:
        """
        Render the current game state.

        Returns:
            The playfield as text if render_mode is "ansi", None otherwise.
        """
        if self.render_mode != "ansi":
            return None

        if self._renderer is None:
            self._renderer = TextRenderer(self._config)
            rows, cols = self._renderer.screen_size
            self._grid = GridDisplay(rows, cols)

        self._renderer.draw_playfield(self._grid, self._game.get_render_data())
        return self._grid.text()

    def close(self) -> None:
        """Clean up resources."""
        if self._grid is not None:
            self._grid.close()
        self._renderer = None
        self._grid = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
