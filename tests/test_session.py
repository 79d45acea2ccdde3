"""
Tests for the session state machine.

Sessions run against a scripted GridDisplay and an in-memory record
store. Fruit columns are scripted too, so every game has a known outcome:
with the basket left at column 15, a fruit in columns 15-19 is caught and
anything else is missed. Each fruit takes `height` ticks (15 by default)
from spawn to resolution, and every tick is one timed key read.
"""

import dataclasses
import random
from collections import deque

import pytest

from fruit_catcher.catch_core.config_loader import load_config
from fruit_catcher.catch_core.display import GridDisplay, ScriptExhausted
from fruit_catcher.catch_core.render_text import TextRenderer
from fruit_catcher.catch_core.session import GameSession, SessionContext, SessionState
from fruit_catcher.catch_core.storage import MemoryRecordStore


TICKS_PER_FRUIT = 15


class ScriptedRandom(random.Random):
    """Random source that spawns fruits in the given columns at minimum speed."""

    def __init__(self, columns):
        super().__init__(0)
        self._columns = deque(columns)

    def randrange(self, start, stop=None, step=1):
        if stop is None:
            return self._columns.popleft() if self._columns else 0
        return start


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def classic_config(config):
    return dataclasses.replace(
        config,
        session=dataclasses.replace(config.session, mode="classic")
    )


@pytest.fixture
def store():
    return MemoryRecordStore()


def make_session(config, store, keys=(), lines=(), columns=()):
    rows, cols = TextRenderer(config).screen_size
    display = GridDisplay(rows, cols, keys=keys, lines=lines)
    context = SessionContext.create(display, config=config, store=store)
    context = dataclasses.replace(context, rng=ScriptedRandom(columns))
    return GameSession(context), display


def idle_ticks(n):
    """Key script entries for n ticks without input."""
    return [None] * n


class TestArcadeSession:
    """Test the full menu -> play -> leaderboard -> replay flow."""

    def test_starts_at_menu(self, config, store):
        """Arcade sessions open on the menu."""
        session, _ = make_session(config, store)

        assert session.state is SessionState.MENU

    def test_full_game_with_name_entry(self, config, store):
        """Two catches, a miss, a name and quit."""
        keys = ["x"] + idle_ticks(3 * TICKS_PER_FRUIT) + ["q"]
        session, display = make_session(
            config, store, keys=keys, lines=["Alice"], columns=[16, 17, 0]
        )

        result = session.run()

        assert session.state is SessionState.TERMINATED
        assert session.result is result
        assert result.games_played == 1
        assert result.last_score == 2
        assert result.high_score == 2
        assert result.last_rank == 1
        assert result.quit_requested
        assert store.records["highscore.txt"] == "2"
        assert store.records["leaderboard.txt"] == "Alice 2\n"

    def test_screens_shown(self, config, store):
        """Menu, game over, leaderboard and replay prompt are all drawn."""
        keys = ["x"] + idle_ticks(TICKS_PER_FRUIT) + ["q"]
        session, display = make_session(
            config, store, keys=keys, lines=["Alice"], columns=[0]
        )
        session.run()

        frames = "\n".join(display.frames)
        assert "CATCH" in frames
        assert "GAME OVER" in frames
        assert "Your final score: 0" in frames
        assert "Congratulations! You're in the top 10!" in frames
        assert "Alice - 0" in frames
        assert "Press 'p' to play again or 'q' to quit." in frames

    def test_tick_timeout_is_fruit_speed(self, config, store):
        """Menu and prompt reads block; play reads wait for the fruit speed."""
        keys = ["x"] + idle_ticks(TICKS_PER_FRUIT) + ["q"]
        session, display = make_session(
            config, store, keys=keys, lines=["Alice"], columns=[0]
        )
        session.run()

        assert display.timeouts[0] is None
        assert display.timeouts[1:1 + TICKS_PER_FRUIT] == [config.fruit.min_speed_ms] * TICKS_PER_FRUIT
        assert display.timeouts[-1] is None

    def test_replay(self, config, store):
        """'p' starts a new game; both games reach the leaderboard."""
        keys = (
            ["x"] + idle_ticks(TICKS_PER_FRUIT) + ["p"]
            + idle_ticks(TICKS_PER_FRUIT) + ["q"]
        )
        session, _ = make_session(
            config, store, keys=keys, lines=["Bob", "Cid"], columns=[0, 0]
        )

        result = session.run()

        assert result.games_played == 2
        assert result.scores == [0, 0]
        assert result.last_rank == 2
        assert store.records["leaderboard.txt"] == "Bob 0\nCid 0\n"
        assert "highscore.txt" not in store.records

    def test_replay_resets_game(self, config, store):
        """A replayed game starts from score 0 with the basket centred."""
        keys = (
            ["x"] + idle_ticks(2 * TICKS_PER_FRUIT) + ["p"]
            + idle_ticks(TICKS_PER_FRUIT) + ["q"]
        )
        session, _ = make_session(
            config, store, keys=keys, lines=["A", "B"], columns=[16, 0, 0]
        )

        result = session.run()

        assert result.scores == [1, 0]
        assert result.high_score == 1
        assert session.game.basket_x == config.basket_start_x
        assert store.records["leaderboard.txt"] == "A 1\nB 0\n"

    def test_non_qualifying_score_skips_name_entry(self, config):
        """A full board with higher scores goes straight to the replay prompt."""
        text = "".join(f"P{i} {50 - 5 * i}\n" for i in range(10))
        store = MemoryRecordStore({"leaderboard.txt": text})
        keys = ["x"] + idle_ticks(TICKS_PER_FRUIT) + ["q"]
        session, display = make_session(config, store, keys=keys, columns=[0])

        result = session.run()

        assert result.last_rank == 0
        assert store.records["leaderboard.txt"] == text
        assert not any("Congratulations" in frame for frame in display.frames)

    def test_prompt_ignores_other_keys(self, config, store):
        """Only the replay and quit keys leave the prompt."""
        keys = ["x"] + idle_ticks(TICKS_PER_FRUIT) + ["a", "z", None, "q"]
        session, display = make_session(
            config, store, keys=keys, lines=["Ann"], columns=[0]
        )

        result = session.run()

        assert result.games_played == 1
        assert display.timeouts[-4:] == [None] * 4

    def test_quit_during_play(self, config, store):
        """'q' mid-game ends the session without a game-over screen."""
        keys = ["x", None, None, "q"]
        session, display = make_session(config, store, keys=keys, columns=[16])

        result = session.run()

        assert session.state is SessionState.TERMINATED
        assert result.quit_requested
        assert result.games_played == 1
        assert result.last_score == 0
        assert session.game.ticks == 2
        assert not any("GAME OVER" in frame for frame in display.frames)
        assert store.records == {}

    def test_blocking_read_without_input(self, config, store):
        """The scripted display refuses to block forever at the menu."""
        session, _ = make_session(config, store)

        with pytest.raises(ScriptExhausted):
            session.run()


class TestClassicSession:
    """Test the single-game mode."""

    def test_starts_playing(self, classic_config, store):
        """Classic sessions skip the menu."""
        session, _ = make_session(classic_config, store)

        assert session.state is SessionState.PLAYING

    def test_one_game_then_exit(self, classic_config, store):
        """The session ends right after the first miss."""
        session, display = make_session(classic_config, store, columns=[16, 0])

        result = session.run()

        assert result.games_played == 1
        assert result.last_score == 1
        assert not result.quit_requested
        assert len(display.timeouts) == 2 * TICKS_PER_FRUIT
        assert None not in display.timeouts
        assert store.records == {"highscore.txt": "1"}

    def test_moving_the_basket(self, classic_config, store):
        """'d' shifts the basket right so a fruit at column 20 is caught."""
        session, _ = make_session(classic_config, store, keys=["d"], columns=[20, 0])

        result = session.run()

        assert result.last_score == 1
        assert session.game.basket_x == 18

    def test_loaded_high_score_is_shown(self, classic_config):
        """The stored high score is displayed and kept when not beaten."""
        store = MemoryRecordStore({"highscore.txt": "7"})
        session, display = make_session(classic_config, store, columns=[0])

        result = session.run()

        assert result.high_score == 7
        assert "High Score: 7" in display.frames[0]
        assert store.records["highscore.txt"] == "7"

    def test_high_score_not_persisted_when_disabled(self, classic_config, store):
        """persist_high_score=False keeps the new best in memory only."""
        config = dataclasses.replace(
            classic_config,
            session=dataclasses.replace(classic_config.session, persist_high_score=False)
        )
        session, _ = make_session(config, store, columns=[16, 0])

        result = session.run()

        assert result.high_score == 1
        assert store.records == {}

    def test_playfield_frame(self, classic_config, store):
        """First frame shows fruit, basket and the score lines."""
        session, display = make_session(classic_config, store, columns=[16])
        session.run()

        rows = display.frames[0].splitlines()
        assert rows[0] == " " * 16 + "*"
        assert rows[14] == " " * 15 + "_____"
        assert rows[15] == "Score: 0"
        assert rows[16] == "High Score: 0"
        assert rows[17].startswith("Controls:")
