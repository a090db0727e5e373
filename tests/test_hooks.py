"""
Tests for the public read hooks.
"""

from datetime import date
from unittest.mock import MagicMock, patch

from titans.hooks import GamesQuery, Query, ResultsQuery, RosterQuery, StatsQuery, use_games, use_stats
from titans.outcomes import SeasonStats
from titans.repositories import GameRepository, PlayerRepository, ResultRepository

TODAY = date(2025, 3, 15)


def _game(team_id, day, time="10:00"):
    return GameRepository().insert(
        {
            "date": day,
            "time": time,
            "opponent_team_id": team_id,
            "location": "Titans Field",
            "game_type": "home",
        }
    )


def _result(team_id, day, ours, theirs):
    return ResultRepository().insert(
        {
            "game_date": day,
            "opponent_team_id": team_id,
            "titans_score": ours,
            "opponent_score": theirs,
            "location": "Titans Field",
        }
    )


class TestGamesQuery:
    def test_today_included_yesterday_excluded(self, make_team):
        team = make_team()
        _game(team["id"], "2025-03-14")
        _game(team["id"], "2025-03-15")
        _game(team["id"], "2025-03-20")

        q = GamesQuery(today=lambda: TODAY)
        q.fetch()

        assert [g["date"] for g in q.data] == ["2025-03-15", "2025-03-20"]
        assert q.error is None
        assert q.loading is False

    def test_nested_opponent(self, make_team):
        team = make_team("Central Catholic", short_name="CC")
        _game(team["id"], "2025-03-20")

        q = GamesQuery(today=lambda: TODAY)
        q.fetch()

        assert q.data[0]["opponent"]["name"] == "Central Catholic"
        assert q.data[0]["opponent"]["short_name"] == "CC"
        assert q.data[0]["home"] is None

    def test_limit(self, make_team):
        team = make_team()
        for day in ("2025-03-16", "2025-03-17", "2025-03-18"):
            _game(team["id"], day)

        q = GamesQuery(limit=2, today=lambda: TODAY)
        q.fetch()

        assert len(q.data) == 2


class TestResultsQuery:
    def test_default_is_latest_only(self, make_team):
        team = make_team()
        _result(team["id"], "2025-03-01", 5, 3)
        _result(team["id"], "2025-03-08", 2, 9)

        q = ResultsQuery()
        q.fetch()

        assert len(q.data) == 1
        assert q.data[0]["game_date"] == "2025-03-08"

    def test_limit_and_order(self, make_team):
        team = make_team("Seneca Valley")
        for day in ("2025-03-01", "2025-03-22", "2025-03-08", "2025-03-15"):
            _result(team["id"], day, 4, 4)

        q = ResultsQuery(limit=3)
        q.fetch()

        assert [r["game_date"] for r in q.data] == ["2025-03-22", "2025-03-15", "2025-03-08"]
        assert q.data[0]["opponent_name"] == "Seneca Valley"


class TestStatsQuery:
    def test_empty(self):
        q = StatsQuery()
        q.fetch()
        assert q.data == SeasonStats()

    def test_invariant(self, make_team):
        team = make_team()
        _result(team["id"], "2025-03-01", 5, 3)
        _result(team["id"], "2025-03-08", 4, 4)
        _result(team["id"], "2025-03-15", 1, 6)

        q = StatsQuery()
        q.fetch()

        s = q.data
        assert s.total_games == 3
        assert s.wins == 1
        assert s.wins + s.losses == s.total_games


class TestRosterQuery:
    def test_active_only_by_jersey(self):
        repo = PlayerRepository()
        repo.insert({"first_name": "No", "last_name": "Number", "is_active": True})
        repo.insert({"first_name": "Ten", "last_name": "Player", "jersey_number": 10, "is_active": True})
        repo.insert({"first_name": "Two", "last_name": "Player", "jersey_number": 2, "is_active": True})
        repo.insert({"first_name": "Gone", "last_name": "Player", "jersey_number": 1, "is_active": False})

        q = RosterQuery()
        q.fetch()

        assert [p["first_name"] for p in q.data] == ["Two", "Ten", "No"]


class TestRefetch:
    def test_idempotent_without_changes(self, make_team):
        team = make_team()
        _game(team["id"], "2025-03-20")

        q = GamesQuery(today=lambda: TODAY)
        q.fetch()
        first = q.data
        q.refetch()

        assert q.data == first

    def test_error_keeps_previous_data(self):
        repo = MagicMock()
        repo.list_recent.return_value = [{"id": 1}]
        q = ResultsQuery(repository=repo)
        q.fetch()

        repo.list_recent.side_effect = RuntimeError("backend down")
        q.refetch()

        assert q.error == "backend down"
        assert q.data == [{"id": 1}]
        assert q.loading is False

    def test_success_clears_error(self):
        repo = MagicMock()
        repo.list_recent.side_effect = [RuntimeError("boom"), [{"id": 2}]]
        q = ResultsQuery(repository=repo)

        q.fetch()
        assert q.error == "boom"
        q.refetch()

        assert q.error is None
        assert q.data == [{"id": 2}]


class _Overtaken(Query):
    """First fetch is overtaken by a second one that resolves before it."""

    name = "overtaken"

    def __init__(self, fail_first=False):
        super().__init__()
        self.calls = 0
        self.fail_first = fail_first

    def _run(self):
        self.calls += 1
        if self.calls == 1:
            self.fetch()
            if self.fail_first:
                raise RuntimeError("late failure")
            return ["stale"]
        return ["fresh"]


class TestStaleResponses:
    def test_late_response_discarded(self):
        q = _Overtaken()
        q.fetch()

        assert q.data == ["fresh"]
        assert q.loading is False

    def test_late_error_discarded(self):
        q = _Overtaken(fail_first=True)
        q.fetch()

        assert q.data == ["fresh"]
        assert q.error is None


class TestUseHooks:
    """Each page run re-reads, so admin changes reach the public page."""

    @patch("titans.hooks.st")
    def test_new_game_shows_on_next_run(self, mock_st, make_team):
        mock_st.session_state = {}
        team = make_team()

        first = use_games()
        assert first.data == []

        _game(team["id"], "2099-01-01")
        second = use_games()

        assert second is first
        assert [g["date"] for g in second.data] == ["2099-01-01"]

    @patch("titans.hooks.st")
    def test_deleted_result_leaves_stats(self, mock_st, make_team):
        mock_st.session_state = {}
        team = make_team()
        row = _result(team["id"], "2025-03-01", 5, 3)

        assert use_stats().data.total_games == 1

        ResultRepository().delete(row["id"])

        assert use_stats().data.total_games == 0

    @patch("titans.hooks.st")
    def test_changed_limit_starts_fresh_hook(self, mock_st):
        mock_st.session_state = {}

        first = use_games(limit=3)
        second = use_games(limit=5)

        assert second is not first
        assert second.limit == 5
