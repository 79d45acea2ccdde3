"""
Terminal Play Mode
==================

Play Catch the Fruit in the terminal (or a pygame window).

Controls:
    - a / LEFT: Move basket left
    - d / RIGHT: Move basket right
    - q: Quit
    - p: Play again (after game over)

Usage:
    python -m tools.play_terminal [--seed SEED] [--classic] [--display {curses,pygame}]
                                  [--data-dir DIR] [--config PATH]
                                  [--log-file PATH] [--debug]
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import Optional

from fruit_catcher.catch_core.config_loader import GameConfig, load_config
from fruit_catcher.catch_core.display import Display, PygameDisplay, run_in_terminal
from fruit_catcher.catch_core.log import setup_logging
from fruit_catcher.catch_core.render_text import TextRenderer
from fruit_catcher.catch_core.session import GameSession, SessionContext, SessionResult
from fruit_catcher.catch_core.storage import FileRecordStore


def play(
    display: Display,
    config: GameConfig,
    data_dir: str,
    seed: Optional[int]
) -> SessionResult:
    """Run one session on an open display."""
    context = SessionContext.create(
        display,
        config=config,
        store=FileRecordStore(data_dir),
        seed=seed
    )
    return GameSession(context).run()


def main():
    parser = argparse.ArgumentParser(description="Play Catch the Fruit")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--classic",
        action="store_true",
        help="Single game without menu or leaderboard"
    )
    parser.add_argument(
        "--display",
        choices=("curses", "pygame"),
        default="curses",
        help="Terminal (curses) or window (pygame) display"
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=".",
        help="Directory for highscore.txt and leaderboard.txt (default: current)"
    )
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--log-file", type=str, default=None, help="Append log records to this file")
    parser.add_argument("--debug", action="store_true", help="Log debug records")

    args = parser.parse_args()

    setup_logging(args.log_file, debug=args.debug)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}")
        return 1

    if args.classic:
        config = dataclasses.replace(
            config,
            session=dataclasses.replace(config.session, mode="classic")
        )

    def run(display: Display) -> SessionResult:
        return play(display, config, args.data_dir, args.seed)

    if args.display == "pygame":
        rows, cols = TextRenderer(config).screen_size
        try:
            display = PygameDisplay(rows, cols, quit_key=config.controls.quit[0])
        except ImportError as e:
            print(f"Error: {e}")
            return 1
        try:
            result = run(display)
        finally:
            display.close()
    else:
        result = run_in_terminal(run)

    print(f"Game Over! Your final score: {result.last_score}")
    print(f"High Score: {result.high_score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
