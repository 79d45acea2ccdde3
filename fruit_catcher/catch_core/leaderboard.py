"""
Leaderboard
===========

Top-N ranking of finished games.

Entries are kept sorted by score, highest first. Equal scores keep the
order they were inserted in, so an older entry outranks a newer one with
the same score.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from fruit_catcher.catch_core.config_loader import GameConfig, get_config

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class LeaderboardEntry:
    """One leaderboard line."""
    name: str
    score: int

    def __str__(self) -> str:
        return f"{self.name} - {self.score}"


def normalize_name(name: str, max_length: int, default: str = "PLAYER") -> str:
    """
    Turn typed text into a storable name.

    Names are stored as one whitespace-free token, so inner whitespace
    becomes "_". The result is cut to max_length characters.
    """
    name = _WHITESPACE.sub("_", name.strip())
    if not name:
        name = default
    return name[:max_length]


def sort_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Sort by score descending. sorted() is stable, so ties keep their order."""
    return sorted(entries, key=lambda e: e.score, reverse=True)


def qualifies(entries: List[LeaderboardEntry], score: int, capacity: int) -> bool:
    """
    True if score earns a place on a leaderboard holding entries.

    A score qualifies while there is room, or when it beats the lowest
    entry of the sorted list.
    """
    if len(entries) < capacity:
        return True
    return score > sort_entries(entries)[-1].score


def record_score(
    entries: Iterable[LeaderboardEntry],
    name: str,
    score: int,
    capacity: int = 10,
    max_name_length: int = 19,
    default_name: str = "PLAYER"
) -> List[LeaderboardEntry]:
    """
    Insert a finished game into a leaderboard.

    Args:
        entries: Existing entries, in any order.
        name: Player name. Normalized with normalize_name().
        score: Final score.
        capacity: Maximum number of entries kept.
        max_name_length: Maximum stored name length.
        default_name: Name stored when name is blank.

    Returns:
        New entry list: sorted descending, at most capacity long. The
        input is returned sorted and unchanged if score does not qualify.
    """
    ranked = sort_entries(entries)
    if qualifies(ranked, score, capacity):
        ranked.append(LeaderboardEntry(
            name=normalize_name(name, max_name_length, default_name),
            score=score
        ))
        ranked = sort_entries(ranked)
    return ranked[:capacity]


class Leaderboard:
    """
    Bounded, sorted sequence of LeaderboardEntry.

    Never holds more than `capacity` entries; insert() enforces it.
    """

    def __init__(
        self,
        entries: Optional[Iterable[LeaderboardEntry]] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize leaderboard.

        Args:
            entries: Initial entries. Sorted and cut to capacity.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._capacity = config.leaderboard.capacity
        self._max_name_length = config.leaderboard.max_name_length
        self._default_name = config.leaderboard.default_name
        self._entries: List[LeaderboardEntry] = sort_entries(entries or [])[:self._capacity]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> Tuple[LeaderboardEntry, ...]:
        """Entries, highest score first."""
        return tuple(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self._capacity

    @property
    def lowest_score(self) -> Optional[int]:
        """Score of the last-ranked entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries[-1].score

    @property
    def top_score(self) -> int:
        """Highest score on the board, 0 when empty."""
        if not self._entries:
            return 0
        return self._entries[0].score

    def qualifies(self, score: int) -> bool:
        """Return True if score would make it onto the board."""
        return qualifies(self._entries, score, self._capacity)

    def insert(self, name: str, score: int) -> int:
        """
        Insert a new entry and return its 1-based rank.

        The name is normalized first (see normalize_name).

        Returns:
            Rank of the new entry, or 0 if the score did not qualify.
        """
        if not self.qualifies(score):
            return 0

        self._entries = record_score(
            self._entries,
            name,
            score,
            self._capacity,
            self._max_name_length,
            self._default_name
        )

        # Ties keep insertion order, so the new entry is the last one with its score
        rank = 0
        for i, entry in enumerate(self._entries, start=1):
            if entry.score == score:
                rank = i
        return rank

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LeaderboardEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> LeaderboardEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"Leaderboard({len(self._entries)}/{self._capacity})"
