"""
Scoring System
==============

Tracks the running score and the high score it is measured against.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreEvent:
    """Record of a catch."""
    points: int
    total: int
    tick: int

    def __repr__(self) -> str:
        return f"ScoreEvent(+{self.points} -> {self.total} @ tick {self.tick})"


class ScoreTracker:
    """
    Tracks game score and the high score.

    The high score is loaded once per session and only raised by
    commit_high_score(), which the session calls when a game ends.
    """

    POINTS_PER_CATCH = 1

    def __init__(self, high_score: int = 0):
        """
        Initialize score tracker.

        Args:
            high_score: Previously persisted high score.
        """
        self._score: int = 0
        self._catches: int = 0
        self._high_score: int = max(0, int(high_score))

    @property
    def score(self) -> int:
        """Current game score."""
        return self._score

    @property
    def catches(self) -> int:
        """Fruits caught this game."""
        return self._catches

    @property
    def high_score(self) -> int:
        """Best score known to this session."""
        return self._high_score

    @high_score.setter
    def high_score(self, value: int) -> None:
        """Set the high score (called when loading from storage)."""
        self._high_score = max(0, int(value))

    @property
    def beats_high_score(self) -> bool:
        """True if the current score exceeds the high score."""
        return self._score > self._high_score

    def apply_catch(self, tick: int) -> ScoreEvent:
        """
        Award points for a catch and return the event.

        Args:
            tick: Tick number the catch happened on.
        """
        self._score += self.POINTS_PER_CATCH
        self._catches += 1
        return ScoreEvent(points=self.POINTS_PER_CATCH, total=self._score, tick=tick)

    def commit_high_score(self) -> bool:
        """
        Raise the high score to the current score if it was exceeded.

        Returns:
            True if the high score changed.
        """
        if self.beats_high_score:
            self._high_score = self._score
            return True
        return False

    def reset(self) -> None:
        """Reset score to zero. The high score is kept."""
        self._score = 0
        self._catches = 0
