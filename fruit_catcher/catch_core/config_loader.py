"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


GAME_MODES = ("arcade", "classic")


@dataclass(frozen=True)
class BoardConfig:
    """Playfield geometry in character cells."""
    width: int        # Grid columns
    height: int       # Grid rows; basket row is height - 1
    info_lines: int   # Text lines drawn below the grid

    @property
    def last_row(self) -> int:
        """Row index the basket sits on."""
        return self.height - 1


@dataclass(frozen=True)
class BasketConfig:
    """Basket size and movement."""
    width: int
    move_step: int
    glyph: str


@dataclass(frozen=True)
class FruitConfig:
    """Fruit speed range (milliseconds per tick) and glyph."""
    min_speed_ms: int   # Inclusive
    max_speed_ms: int   # Exclusive
    glyph: str


@dataclass(frozen=True)
class LeaderboardConfig:
    """Leaderboard limits."""
    capacity: int
    max_name_length: int
    default_name: str


@dataclass(frozen=True)
class StorageConfig:
    """Record names used by the persistence layer."""
    high_score_file: str
    leaderboard_file: str


@dataclass(frozen=True)
class SessionConfig:
    """Session flow options."""
    mode: str                  # "arcade" or "classic"
    persist_high_score: bool

    @property
    def is_classic(self) -> bool:
        return self.mode == "classic"


@dataclass(frozen=True)
class ControlsConfig:
    """Key bindings. Special keys use curses names (KEY_LEFT, ...)."""
    left: Tuple[str, ...]
    right: Tuple[str, ...]
    quit: Tuple[str, ...]
    replay: Tuple[str, ...]


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_ticks: int   # Truncation limit for agent episodes


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    basket: BasketConfig
    fruit: FruitConfig
    leaderboard: LeaderboardConfig
    storage: StorageConfig
    session: SessionConfig
    controls: ControlsConfig
    caps: CapsConfig
    credits: Tuple[str, ...]

    @property
    def max_basket_x(self) -> int:
        """Rightmost legal basket position."""
        return self.board.width - self.basket.width

    @property
    def basket_start_x(self) -> int:
        """Basket position at the start of every game (grid centre)."""
        return min(self.board.width // 2, self.max_basket_x)

    @property
    def screen_rows(self) -> int:
        """Rows needed for the grid and the info lines."""
        return self.board.height + self.board.info_lines


def _parse_keys(keys_data: List, section: str) -> Tuple[str, ...]:
    """Parse a key binding list from YAML."""
    if isinstance(keys_data, str):
        keys_data = [keys_data]
    keys = tuple(str(k) for k in keys_data)
    if not keys:
        raise ValueError(f"controls.{section} must bind at least one key")
    return keys


def _parse_glyph(glyph_data, name: str) -> str:
    """Parse a single drawable glyph."""
    glyph = str(glyph_data)
    if not glyph:
        raise ValueError(f"{name} glyph must not be empty")
    return glyph


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.width <= 0 or board.height <= 1:
        raise ValueError(
            f"Board must be at least 1x2 cells, got {board.width}x{board.height}"
        )

    if not 0 < config.basket.width <= board.width:
        raise ValueError(
            f"basket.width ({config.basket.width}) must be in [1, board.width={board.width}]"
        )

    if config.basket.move_step <= 0:
        raise ValueError(f"basket.move_step must be positive, got {config.basket.move_step}")

    # Speed range is half-open, so it needs at least one value
    if not 0 < config.fruit.min_speed_ms < config.fruit.max_speed_ms:
        raise ValueError(
            f"fruit speed range [{config.fruit.min_speed_ms}, {config.fruit.max_speed_ms}) "
            f"must be non-empty and positive"
        )

    if config.leaderboard.capacity <= 0:
        raise ValueError(f"leaderboard.capacity must be positive, got {config.leaderboard.capacity}")

    if config.leaderboard.max_name_length <= 0:
        raise ValueError(
            f"leaderboard.max_name_length must be positive, got {config.leaderboard.max_name_length}"
        )

    if config.session.mode not in GAME_MODES:
        raise ValueError(f"session.mode must be one of {GAME_MODES}, got '{config.session.mode}'")

    # A key bound to two actions would make the mapping order-dependent
    bindings = {}
    for action in ("left", "right", "quit", "replay"):
        for key in getattr(config.controls, action):
            if key in bindings and bindings[key] != action:
                raise ValueError(
                    f"Key '{key}' bound to both '{bindings[key]}' and '{action}'"
                )
            bindings[key] = action

    if config.caps.max_ticks <= 0:
        raise ValueError(f"caps.max_ticks must be positive, got {config.caps.max_ticks}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        info_lines=int(board_data.get("info_lines", 3))
    )

    basket_data = raw["basket"]
    basket = BasketConfig(
        width=int(basket_data["width"]),
        move_step=int(basket_data["move_step"]),
        glyph=_parse_glyph(basket_data.get("glyph", "_"), "basket")
    )

    fruit_data = raw["fruit"]
    fruit = FruitConfig(
        min_speed_ms=int(fruit_data["min_speed_ms"]),
        max_speed_ms=int(fruit_data["max_speed_ms"]),
        glyph=_parse_glyph(fruit_data.get("glyph", "*"), "fruit")
    )

    lb_data = raw["leaderboard"]
    leaderboard = LeaderboardConfig(
        capacity=int(lb_data["capacity"]),
        max_name_length=int(lb_data["max_name_length"]),
        default_name=str(lb_data.get("default_name", "PLAYER"))
    )

    storage_data = raw.get("storage", {})
    storage = StorageConfig(
        high_score_file=str(storage_data.get("high_score_file", "highscore.txt")),
        leaderboard_file=str(storage_data.get("leaderboard_file", "leaderboard.txt"))
    )

    session_data = raw.get("session", {})
    session = SessionConfig(
        mode=str(session_data.get("mode", "arcade")),
        persist_high_score=bool(session_data.get("persist_high_score", True))
    )

    controls_data = raw.get("controls", {})
    controls = ControlsConfig(
        left=_parse_keys(controls_data.get("left", ["a", "KEY_LEFT"]), "left"),
        right=_parse_keys(controls_data.get("right", ["d", "KEY_RIGHT"]), "right"),
        quit=_parse_keys(controls_data.get("quit", ["q"]), "quit"),
        replay=_parse_keys(controls_data.get("replay", ["p"]), "replay")
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 5000))
    )

    config = GameConfig(
        board=board,
        basket=basket,
        fruit=fruit,
        leaderboard=leaderboard,
        storage=storage,
        session=session,
        controls=controls,
        caps=caps,
        credits=tuple(str(c) for c in raw.get("credits", []))
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
