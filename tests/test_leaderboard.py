"""
Tests for leaderboard ranking.
"""

import pytest

from fruit_catcher.catch_core.config_loader import load_config
from fruit_catcher.catch_core.leaderboard import (
    Leaderboard,
    LeaderboardEntry,
    normalize_name,
    qualifies,
    record_score,
    sort_entries,
)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def full_board():
    """Ten entries scored 50, 45, ..., 5."""
    return [LeaderboardEntry(f"P{i}", 50 - 5 * i) for i in range(10)]


def scores(entries):
    return [e.score for e in entries]


class TestRecordScore:
    """Test the pure ranking function."""

    def test_full_board_rejects_equal_lowest(self, full_board):
        """A score equal to the lowest entry does not get in."""
        result = record_score(full_board, "NEW", 5)

        assert result == full_board
        assert not qualifies(full_board, 5, 10)

    def test_full_board_accepts_higher_than_lowest(self, full_board):
        """Score 6 displaces the old 10th place."""
        result = record_score(full_board, "NEW", 6)

        assert len(result) == 10
        assert scores(result) == [50, 45, 40, 35, 30, 25, 20, 15, 10, 6]
        assert result[-1].name == "NEW"
        assert LeaderboardEntry("P9", 5) not in result

    def test_top_score_goes_first(self, full_board):
        """A new best score is ranked first."""
        result = record_score(full_board, "ACE", 99)

        assert result[0] == LeaderboardEntry("ACE", 99)
        assert result[-1].score == 10

    def test_room_left_accepts_anything(self):
        """With free slots even a zero score is recorded."""
        result = record_score([LeaderboardEntry("A", 3)], "B", 0)

        assert result == [LeaderboardEntry("A", 3), LeaderboardEntry("B", 0)]

    def test_ties_keep_insertion_order(self):
        """A new entry ranks below older entries with the same score."""
        entries = [LeaderboardEntry("OLD", 10), LeaderboardEntry("LOW", 2)]
        result = record_score(entries, "NEW", 10)

        assert [e.name for e in result] == ["OLD", "NEW", "LOW"]

    def test_unsorted_input(self):
        """Input in any order comes out sorted."""
        entries = [LeaderboardEntry("C", 1), LeaderboardEntry("A", 9), LeaderboardEntry("B", 5)]
        result = record_score(entries, "D", 7)

        assert scores(result) == [9, 7, 5, 1]

    def test_name_truncated(self):
        """Names longer than the limit are cut to 19 characters."""
        result = record_score([], "ABCDEFGHIJKLMNOPQRSTUVWXYZ", 4)

        assert result[0].name == "ABCDEFGHIJKLMNOPQRS"
        assert len(result[0].name) == 19

    def test_name_with_spaces_is_one_token(self):
        """Whitespace in a recorded name becomes underscores."""
        result = record_score([], "  Jane   Doe ", 5)

        assert result == [LeaderboardEntry("Jane_Doe", 5)]

    def test_blank_name_gets_default(self):
        """A blank name is stored as the default name."""
        assert record_score([], "   ", 1)[0].name == "PLAYER"
        assert record_score([], "", 1, default_name="ANON")[0].name == "ANON"

    def test_capacity_never_exceeded(self):
        """Repeated inserts keep at most `capacity` entries, sorted."""
        entries = []
        for score in [3, 8, 1, 8, 12, 0, 5, 5, 7, 2, 9, 4, 11, 6, 10]:
            entries = record_score(entries, "X", score, capacity=10)
            assert len(entries) <= 10
            assert scores(entries) == sorted(scores(entries), reverse=True)

        assert scores(entries) == [12, 11, 10, 9, 8, 8, 7, 6, 5, 5]

    def test_sort_is_idempotent(self, full_board):
        """Sorting an already sorted list changes nothing."""
        once = sort_entries(full_board)

        assert sort_entries(once) == once


class TestNormalizeName:
    """Test name cleanup before storage."""

    def test_inner_whitespace(self):
        """Spaces inside a name become underscores."""
        assert normalize_name("Jane Doe", 19) == "Jane_Doe"

    def test_outer_whitespace(self):
        """Leading and trailing whitespace is dropped."""
        assert normalize_name("  Bob \n", 19) == "Bob"

    def test_empty_name_uses_default(self):
        """Blank names fall back to the default."""
        assert normalize_name("   ", 19) == "PLAYER"
        assert normalize_name("", 19, "ANON") == "ANON"

    def test_truncation(self):
        """Normalized names are cut to max_length."""
        assert normalize_name("a b c d e f g h i j k", 5) == "a_b_c"


class TestLeaderboard:
    """Test the bounded leaderboard object."""

    def test_empty(self, config):
        """An empty board accepts any score."""
        board = Leaderboard([], config)

        assert len(board) == 0
        assert board.lowest_score is None
        assert board.top_score == 0
        assert board.qualifies(0)

    def test_insert_returns_rank(self, config, full_board):
        """insert() returns the 1-based rank of the new entry."""
        board = Leaderboard(full_board, config)

        assert board.insert("MID", 33) == 5
        assert board[4] == LeaderboardEntry("MID", 33)
        assert len(board) == 10
        assert board.lowest_score == 10

    def test_insert_rank_with_tie(self, config):
        """A tied entry is ranked after the older one."""
        board = Leaderboard([LeaderboardEntry("OLD", 7)], config)

        assert board.insert("NEW", 7) == 2

    def test_insert_not_qualifying(self, config, full_board):
        """A non-qualifying score returns rank 0 and leaves the board as is."""
        board = Leaderboard(full_board, config)

        assert board.insert("NOPE", 5) == 0
        assert list(board) == full_board

    def test_insert_normalizes_name(self, config):
        """Names are stored as a single token."""
        board = Leaderboard([], config)
        board.insert("big winner", 3)

        assert board[0].name == "big_winner"

    def test_initial_entries_cut_to_capacity(self, config):
        """More than `capacity` initial entries are sorted then cut."""
        entries = [LeaderboardEntry(str(i), i) for i in range(15)]
        board = Leaderboard(entries, config)

        assert board.is_full
        assert board.capacity == 10
        assert scores(board.entries) == list(range(14, 4, -1))

    def test_entry_str(self):
        """Entries display as "name - score"."""
        assert str(LeaderboardEntry("Ann", 12)) == "Ann - 12"
