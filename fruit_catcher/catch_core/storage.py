"""
Score Storage
=============

Persists the high score and the leaderboard as small text records.

Records live in a RecordStore keyed by file name. FileRecordStore maps
keys to files in a directory; MemoryRecordStore keeps them in a dict.

Formats:
    high score   a single decimal integer, no trailing newline required
    leaderboard  one "<name> <score>" line per entry, highest score first

Persistence is best-effort: a missing record reads as "no data", a
malformed leaderboard is read up to the first bad line, and a failed
write is logged and reported through the return value. Nothing here
raises into the game loop.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from fruit_catcher.catch_core.config_loader import GameConfig, get_config
from fruit_catcher.catch_core.leaderboard import LeaderboardEntry, normalize_name, sort_entries

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class RecordStore(ABC):
    """Key-value store of text records."""

    @abstractmethod
    def read_text(self, key: str) -> Optional[str]:
        """Return the record's text, or None if it does not exist."""

    @abstractmethod
    def write_text(self, key: str, text: str) -> None:
        """Replace the record's text. Raises OSError on failure."""


class FileRecordStore(RecordStore):
    """Records are files in a directory, one file per key."""

    def __init__(self, directory: Union[str, Path] = "."):
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self._directory / key

    def read_text(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, "r") as f:
            return f.read()

    def write_text(self, key: str, text: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        with open(self.path_for(key), "w") as f:
            f.write(text)


class MemoryRecordStore(RecordStore):
    """In-memory records, for tests and headless play."""

    def __init__(self, records: Optional[Dict[str, str]] = None):
        self.records: Dict[str, str] = dict(records or {})

    def read_text(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def write_text(self, key: str, text: str) -> None:
        self.records[key] = text


# =============================================================================
# Record codecs
# =============================================================================

def parse_high_score(text: Optional[str]) -> int:
    """
    Parse a high-score record.

    Reads the leading integer and ignores anything after it. Missing,
    empty or unparsable records, and negative values, read as 0.
    """
    if text is None:
        return 0
    match = _LEADING_INT.match(text)
    if match is None:
        if text.strip():
            logger.warning("Ignoring unparsable high score record: %r", text[:40])
        return 0
    return max(0, int(match.group(1)))


def format_high_score(high_score: int) -> str:
    return str(int(high_score))


def parse_leaderboard(text: Optional[str], capacity: int) -> List[LeaderboardEntry]:
    """
    Parse a leaderboard record.

    Blank lines are skipped. Parsing stops at the first line that is not
    exactly "<name> <non-negative integer>", and after `capacity` entries.
    Whatever was read up to that point is the leaderboard.
    """
    entries: List[LeaderboardEntry] = []
    if text is None:
        return entries

    for line_no, line in enumerate(text.splitlines(), start=1):
        if len(entries) >= capacity:
            break
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2 or not fields[1].isdecimal():
            logger.warning(
                "Leaderboard line %d is malformed (%r); keeping %d entries",
                line_no, line[:40], len(entries)
            )
            break
        entries.append(LeaderboardEntry(name=fields[0], score=int(fields[1])))

    return entries


def format_leaderboard(entries: List[LeaderboardEntry]) -> str:
    return "".join(f"{e.name} {e.score}\n" for e in entries)


# =============================================================================
# Storage facade
# =============================================================================

class ScoreStorage:
    """
    High-score and leaderboard persistence on top of a RecordStore.

    Record keys come from the storage section of the config.
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize storage.

        Args:
            store: Backing record store. Current directory if None.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()
        if store is None:
            store = FileRecordStore()

        self._config = config
        self._store = store
        self._high_score_key = config.storage.high_score_file
        self._leaderboard_key = config.storage.leaderboard_file
        self._capacity = config.leaderboard.capacity
        self._max_name_length = config.leaderboard.max_name_length
        self._default_name = config.leaderboard.default_name

    def _read(self, key: str) -> Optional[str]:
        try:
            text = self._store.read_text(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", key, e)
            return None
        if text is None:
            logger.debug("No %s record, starting empty", key)
        return text

    def _write(self, key: str, text: str) -> bool:
        try:
            self._store.write_text(key, text)
        except OSError as e:
            logger.warning("Failed to save %s: %s", key, e)
            return False
        logger.debug("Saved %s (%d bytes)", key, len(text))
        return True

    def load_high_score(self) -> int:
        """Load the high score. 0 if there is none."""
        return parse_high_score(self._read(self._high_score_key))

    def save_high_score(self, high_score: int) -> bool:
        """Overwrite the high score record. Returns False if the write failed."""
        return self._write(self._high_score_key, format_high_score(high_score))

    def load_leaderboard(self) -> List[LeaderboardEntry]:
        """Load leaderboard entries, highest score first."""
        entries = parse_leaderboard(self._read(self._leaderboard_key), self._capacity)
        return sort_entries(entries)

    def save_leaderboard(self, entries: List[LeaderboardEntry]) -> bool:
        """
        Overwrite the leaderboard record with at most `capacity` entries.

        Names are normalized on the way out so every line reads back as
        one "<name> <score>" pair.
        """
        entries = [
            LeaderboardEntry(
                name=normalize_name(e.name, self._max_name_length, self._default_name),
                score=e.score
            )
            for e in sort_entries(entries)[:self._capacity]
        ]
        return self._write(self._leaderboard_key, format_leaderboard(entries))
