"""
Game Session
============

Runs the menu -> play -> game over -> leaderboard -> replay flow.

States:

    MENU -> PLAYING -> GAME_OVER -+-> NAME_ENTRY -> LEADERBOARD -+
              ^                   |                              |
              |                   +------------------------------+
              |                                                  v
              +-------------------------------------------- PROMPT_REPLAY -> TERMINATED

PLAYING goes straight to TERMINATED on quit. In classic mode the menu,
leaderboard and replay prompt are skipped: the session is one game.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from fruit_catcher.catch_core.config_loader import GameConfig, get_config
from fruit_catcher.catch_core.controls import Action, KeyMap
from fruit_catcher.catch_core.display import Display
from fruit_catcher.catch_core.game import CoreGame
from fruit_catcher.catch_core.leaderboard import Leaderboard
from fruit_catcher.catch_core.render_text import TextRenderer
from fruit_catcher.catch_core.storage import RecordStore, ScoreStorage

logger = logging.getLogger(__name__)


class SessionState(Enum):
    MENU = auto()
    PLAYING = auto()
    GAME_OVER = auto()
    NAME_ENTRY = auto()
    LEADERBOARD = auto()
    PROMPT_REPLAY = auto()
    TERMINATED = auto()


@dataclass
class SessionContext:
    """
    Everything a session works with, built once at startup.

    Holds the random source and the display explicitly so that nothing
    in the game depends on process-wide state.
    """
    config: GameConfig
    display: Display
    storage: ScoreStorage
    rng: random.Random
    keymap: KeyMap
    renderer: TextRenderer

    @classmethod
    def create(
        cls,
        display: Display,
        config: Optional[GameConfig] = None,
        store: Optional[RecordStore] = None,
        seed: Optional[int] = None
    ) -> "SessionContext":
        """
        Build a context with default collaborators.

        Args:
            display: Where to draw and read keys.
            config: Game configuration. Uses default if None.
            store: Record store for scores. Current directory if None.
            seed: Random seed. Random if None.
        """
        if config is None:
            config = get_config()
        return cls(
            config=config,
            display=display,
            storage=ScoreStorage(store, config),
            rng=random.Random(seed),
            keymap=KeyMap(config),
            renderer=TextRenderer(config),
        )


@dataclass
class SessionResult:
    """Summary of a finished session."""
    games_played: int = 0
    last_score: int = 0
    high_score: int = 0
    quit_requested: bool = False
    last_rank: int = 0          # Leaderboard rank of the last entered score, 0 if none
    scores: List[int] = field(default_factory=list)


class GameSession:
    """
    State machine driving one run of the program.

    Each state has a handler that does its screen's work and returns the
    next state. run() loops until TERMINATED.
    """

    def __init__(self, context: SessionContext):
        self._config = context.config
        self._display = context.display
        self._renderer = context.renderer
        self._keymap = context.keymap
        self._storage = context.storage
        self._classic = context.config.session.is_classic

        self._game = CoreGame(
            config=self._config,
            rng=context.rng,
            high_score=self._storage.load_high_score()
        )
        self._leaderboard: Optional[Leaderboard] = None
        self._result = SessionResult(high_score=self._game.high_score)
        self._state = SessionState.PLAYING if self._classic else SessionState.MENU

        self._handlers: Dict[SessionState, Callable[[], SessionState]] = {
            SessionState.MENU: self._on_menu,
            SessionState.PLAYING: self._on_playing,
            SessionState.GAME_OVER: self._on_game_over,
            SessionState.NAME_ENTRY: self._on_name_entry,
            SessionState.LEADERBOARD: self._on_leaderboard,
            SessionState.PROMPT_REPLAY: self._on_prompt_replay,
        }

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def game(self) -> CoreGame:
        return self._game

    @property
    def result(self) -> SessionResult:
        return self._result

    def run(self) -> SessionResult:
        """Run until the player quits. Returns the session summary."""
        while self._state is not SessionState.TERMINATED:
            next_state = self._handlers[self._state]()
            logger.debug("Session %s -> %s", self._state.name, next_state.name)
            self._state = next_state
        return self._result

    # -------------------------------------------------------------------------
    # State handlers
    # -------------------------------------------------------------------------

    def _on_menu(self) -> SessionState:
        self._renderer.draw_menu(self._display)
        self._display.read_key(None)
        return SessionState.PLAYING

    def _on_playing(self) -> SessionState:
        game = self._game
        while not game.is_over:
            self._renderer.draw_playfield(self._display, game.get_render_data())

            # The input timeout is the game clock: one read is one tick
            key = self._display.read_key(game.fruit.speed_ms)
            action = self._keymap.action_for(key)
            if action is Action.QUIT:
                self._finish_game(quit_requested=True)
                return SessionState.TERMINATED

            game.apply_action(action)
            game.advance_tick()

        self._finish_game(quit_requested=False)
        if self._classic:
            return SessionState.TERMINATED
        return SessionState.GAME_OVER

    def _on_game_over(self) -> SessionState:
        score = self._game.score
        self._leaderboard = Leaderboard(self._storage.load_leaderboard(), self._config)
        qualifies = self._leaderboard.qualifies(score)

        self._renderer.draw_game_over(self._display, score, self._game.high_score, qualifies)
        if qualifies:
            return SessionState.NAME_ENTRY
        return SessionState.PROMPT_REPLAY

    def _on_name_entry(self) -> SessionState:
        row, col = self._renderer.draw_name_prompt(self._display)
        name = self._display.read_line(row, col, self._config.leaderboard.max_name_length)

        rank = self._leaderboard.insert(name, self._game.score)
        self._result.last_rank = rank
        logger.info("Recorded score %d at rank %d", self._game.score, rank)
        self._storage.save_leaderboard(list(self._leaderboard))
        return SessionState.LEADERBOARD

    def _on_leaderboard(self) -> SessionState:
        self._renderer.draw_leaderboard(self._display, self._leaderboard)
        return SessionState.PROMPT_REPLAY

    def _on_prompt_replay(self) -> SessionState:
        self._renderer.draw_replay_prompt(self._display)
        while True:
            action = self._keymap.action_for(self._display.read_key(None))
            if action is Action.REPLAY:
                self._game.reset()
                self._result.last_rank = 0
                return SessionState.PLAYING
            if action is Action.QUIT:
                self._result.quit_requested = True
                return SessionState.TERMINATED

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _finish_game(self, quit_requested: bool) -> None:
        """Record the game in the result and apply the high-score policy."""
        score = self._game.score
        self._result.games_played += 1
        self._result.last_score = score
        self._result.scores.append(score)
        self._result.quit_requested = quit_requested

        if self._game.commit_high_score():
            logger.info("New high score: %d", score)
            if self._config.session.persist_high_score:
                self._storage.save_high_score(score)
        self._result.high_score = self._game.high_score
