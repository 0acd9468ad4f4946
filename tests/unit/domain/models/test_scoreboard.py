# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Tests for scoreboard ranking.

Tests cover:
- Payload validation
- Stable ranking on score ties
- Position lookup, including absent identities
"""

import pytest

from spotiquiz.src.domain.models.scoreboard import (
    UNRANKED,
    RankedEntry,
    Scoreboard,
    format_position,
    position_of,
    rank,
    ranked_rows,
)
from spotiquiz.src.monitoring.core.exceptions import MalformedEventError


class TestScoreboard:
    """Test the read-only scoreboard mapping."""

    def test_from_payload_keeps_order(self):
        board = Scoreboard.from_payload({"p2": 10, "p1": 30})

        assert list(board) == ["p2", "p1"]
        assert board["p1"] == 30
        assert len(board) == 2

    def test_from_payload_none_is_empty(self):
        board = Scoreboard.from_payload(None)

        assert len(board) == 0
        assert board.to_dict() == {}

    @pytest.mark.parametrize("payload", [
        ["p1", 10],
        "p1",
        {"p1": -1},
        {"p1": "10"},
        {"p1": True},
        {"p1": 1.5},
    ])
    def test_from_payload_rejects_invalid(self, payload):
        with pytest.raises(MalformedEventError):
            Scoreboard.from_payload(payload)

    def test_is_read_only(self):
        board = Scoreboard({"p1": 1})

        with pytest.raises(TypeError):
            board["p1"] = 2  # type: ignore[index]

    def test_source_mapping_is_copied(self):
        source = {"p1": 1}
        board = Scoreboard(source)
        source["p1"] = 99

        assert board["p1"] == 1

    def test_equality_with_plain_mapping(self):
        assert Scoreboard({"p1": 1}) == {"p1": 1}


class TestRanking:
    """Test rank / position_of."""

    def test_rank_orders_by_score_with_stable_ties(self):
        board = Scoreboard({"p1": 30, "p2": 50, "p3": 30})

        assert rank(board) == [
            RankedEntry("p2", 50),
            RankedEntry("p1", 30),
            RankedEntry("p3", 30),
        ]

    def test_positions(self):
        board = Scoreboard({"p1": 30, "p2": 50, "p3": 30})

        assert position_of(board, "p2") == 1
        assert position_of(board, "p1") == 2
        assert position_of(board, "p3") == 3

    def test_absent_identity_is_unranked(self):
        board = Scoreboard({"p1": 30})

        assert position_of(board, "someone-else") == UNRANKED
        assert format_position(UNRANKED) == "?"

    def test_empty_scoreboard(self):
        assert rank(Scoreboard()) == []
        assert position_of(Scoreboard(), "p1") == UNRANKED

    def test_format_position(self):
        assert format_position(1) == "#1"
        assert format_position(12) == "#12"

    def test_ranked_rows(self):
        rows = ranked_rows({"a": 0, "b": 1000})

        assert rows == [(1, "b", 1000), (2, "a", 0)]
