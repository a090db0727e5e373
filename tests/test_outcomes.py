"""
Tests for the win/tie/loss rule and season stats.
"""

import pytest

from titans.outcomes import (
    LOSS,
    TIE,
    WIN,
    SeasonStats,
    compute_stats,
    head_to_head,
    is_loss,
    is_tie,
    is_win,
    outcome,
    outcome_label,
)


def _r(ours, theirs):
    return {"titans_score": ours, "opponent_score": theirs}


class TestOutcome:
    @pytest.mark.parametrize(
        "ours,theirs,expected",
        [(10, 4, WIN), (4, 10, LOSS), (7, 7, TIE), (0, 0, TIE)],
    )
    def test_exactly_one_outcome(self, ours, theirs, expected):
        row = _r(ours, theirs)
        flags = [is_win(row), is_tie(row), is_loss(row)]
        assert flags.count(True) == 1
        assert outcome(row) == expected

    def test_label_is_capitalized(self):
        assert outcome_label(_r(3, 1)) == "Win"
        assert outcome_label(_r(1, 3)) == "Loss"
        assert outcome_label(_r(2, 2)) == "Tie"


class TestComputeStats:
    def test_empty_set(self):
        assert compute_stats([]) == SeasonStats(0, 0, 0, 0, 0)

    def test_totals(self):
        stats = compute_stats([_r(10, 4), _r(3, 8), _r(5, 5)])
        assert stats.total_games == 3
        assert stats.wins == 1
        assert stats.total_goals == 18
        assert stats.goals_against == 17

    def test_ties_count_as_losses(self):
        stats = compute_stats([_r(5, 5), _r(6, 2)])
        assert stats.losses == 1
        assert stats.wins + stats.losses == stats.total_games

    def test_missing_scores_treated_as_zero(self):
        stats = compute_stats([{"titans_score": None, "opponent_score": 2}])
        assert stats.total_goals == 0
        assert stats.losses == 1


class TestHeadToHead:
    def test_record(self):
        assert head_to_head([_r(2, 1), _r(1, 2), _r(1, 1)]) == {"wins": 1, "losses": 2}
