"""
Catch Core - The game engine.

This module provides the tick-based game simulation, the session state
machine with its menu and leaderboard screens, score persistence, and a
Gymnasium environment wrapper for agents.

Main exports:
- CoreGame: Game state and per-tick rules
- GameSession / SessionContext: Menu, play, game over and replay flow
- Leaderboard / record_score: Top-10 ranking
- ScoreStorage: High score and leaderboard persistence
- CatchFruitEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from fruit_catcher.catch_core.config_loader import GameConfig, load_config
from fruit_catcher.catch_core.controls import Action, KeyMap
from fruit_catcher.catch_core.rng import Fruit, FruitSpawner
from fruit_catcher.catch_core.rules import advance_tick
from fruit_catcher.catch_core.game import CoreGame, TickResult
from fruit_catcher.catch_core.leaderboard import (
    Leaderboard,
    LeaderboardEntry,
    record_score,
)
from fruit_catcher.catch_core.storage import (
    FileRecordStore,
    MemoryRecordStore,
    ScoreStorage,
)
from fruit_catcher.catch_core.display import (
    CursesDisplay,
    Display,
    GridDisplay,
    PygameDisplay,
    run_in_terminal,
)
from fruit_catcher.catch_core.render_text import TextRenderer
from fruit_catcher.catch_core.session import (
    GameSession,
    SessionContext,
    SessionResult,
    SessionState,
)
from fruit_catcher.catch_core.env_gym import CatchFruitEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Action",
    "KeyMap",
    "Fruit",
    "FruitSpawner",
    "advance_tick",
    "CoreGame",
    "TickResult",
    "Leaderboard",
    "LeaderboardEntry",
    "record_score",
    "FileRecordStore",
    "MemoryRecordStore",
    "ScoreStorage",
    "CursesDisplay",
    "Display",
    "GridDisplay",
    "PygameDisplay",
    "run_in_terminal",
    "TextRenderer",
    "GameSession",
    "SessionContext",
    "SessionResult",
    "SessionState",
    "CatchFruitEnv",
]
