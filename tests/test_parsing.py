"""
Unit Tests for engine output parsing

Tests for progress-line and board-dump parsing, focusing on:
    - Field matching (depth / cp / pv as whole words)
    - Depth filtering
    - Rejection of mate scores and unrelated lines
"""

import pytest

from opening_tree.engine.parsing import parse_candidate, parse_fen
from opening_tree.moves import Move


class TestParseCandidate:
    """Tests for parse_candidate()."""

    def test_minimal_line(self):
        move = parse_candidate("info depth 3 score cp 20 pv d2d4 d7d5", 3)
        assert move == Move("d2d4", 20)

    def test_stockfish_multipv_line(self):
        line = (
            "info depth 18 seldepth 24 multipv 2 score cp -35 nodes 812345 "
            "nps 1203000 hashfull 312 tbhits 0 time 675 pv c7c5 g1f3 d7d6 d2d4"
        )
        assert parse_candidate(line, 18) == Move("c7c5", -35)

    def test_bound_score(self):
        line = "info depth 10 seldepth 14 multipv 1 score cp 41 upperbound nodes 9000 pv e2e4"
        assert parse_candidate(line, 10) == Move("e2e4", 41)

    def test_single_move_pv(self):
        assert parse_candidate("info depth 5 score cp 0 pv e7e8q", 5) == Move("e7e8q", 0)

    def test_wrong_depth_ignored(self):
        assert parse_candidate("info depth 2 score cp 20 pv d2d4 d7d5", 3) is None

    def test_seldepth_is_not_depth(self):
        """Only the depth field counts, not seldepth."""
        line = "info depth 2 seldepth 3 score cp 20 pv d2d4"
        assert parse_candidate(line, 3) is None
        assert parse_candidate(line, 2) == Move("d2d4", 20)

    @pytest.mark.parametrize(
        "line",
        [
            "info depth 12 seldepth 8 multipv 1 score mate 3 nodes 100 pv h5f7",
            "info depth 12 currmove e2e4 currmovenumber 1",
            "info string NNUE evaluation using nn-xyz.nnue enabled",
            "bestmove e2e4 ponder e7e5",
            "info depth 12 score cp 15",
            "",
        ],
    )
    def test_non_matching_lines(self, line):
        assert parse_candidate(line, 12) is None

    def test_deterministic(self):
        line = "info depth 7 seldepth 9 multipv 3 score cp 12 nodes 1 pv g1f3 g8f6"
        assert parse_candidate(line, 7) == parse_candidate(line, 7)
        assert parse_candidate(line, 6) is None
        assert parse_candidate(line, 6) is None


class TestParseFen:
    """Tests for parse_fen()."""

    def test_counters_removed(self):
        line = "Fen: rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        assert parse_fen(line) == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq -"

    def test_trailing_newline(self):
        line = "Fen: 8/8/8/8/8/8/8/K6k w - - 12 40\n"
        assert parse_fen(line) == "8/8/8/8/8/8/8/K6k w - -"

    def test_other_lines(self):
        assert parse_fen("Key: 8F8F01D4562F59FB") is None
        assert parse_fen(" +---+---+---+---+---+---+---+---+") is None
