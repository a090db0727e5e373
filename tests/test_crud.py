"""
Tests for the admin CRUD screen state machine and form specs.
"""

from datetime import date, time
from unittest.mock import MagicMock

import pytest

from titans.crud import (
    FORM_OPEN,
    GAME_FORM,
    LISTING,
    PLAYER_FORM,
    RESULT_FORM,
    TEAM_FORM,
    CrudScreen,
    TeamPicker,
    home_team_defaults,
)
from titans.models import HOME_TEAM_SETTING
from titans.repositories import GameRepository, ResultRepository, SettingsRepository, TeamRepository


@pytest.fixture(autouse=True)
def default_season(monkeypatch):
    monkeypatch.delenv("SEASON", raising=False)


def _game_values(team_id, **overrides):
    values = {
        "date": date(2025, 3, 15),
        "time": time(13, 0),
        "opponent_team_id": team_id,
        "location": "Titans Field",
        "game_type": "home",
        "notes": "Season opener",
    }
    values.update(overrides)
    return values


class TestGamesScreen:
    def test_create_round_trip(self, make_team):
        team = make_team()
        screen = CrudScreen(GameRepository(), GAME_FORM)
        screen.load()

        screen.open_create()
        assert screen.state == FORM_OPEN
        assert screen.values["game_type"] == "home"
        assert screen.values["season"] == "2025-26"

        assert screen.submit({**screen.values, **_game_values(team["id"])}) is True

        assert screen.state == LISTING
        assert len(screen.rows) == 1
        row = screen.rows[0]
        assert row["date"] == "2025-03-15"
        assert row["time"] == "13:00"
        assert row["opponent_team_id"] == team["id"]
        assert row["location"] == "Titans Field"
        assert row["game_type"] == "home"
        assert row["notes"] == "Season opener"
        assert row["season"] == "2025-26"
        assert row["opponent"]["name"] == team["name"]

    def test_validation_blocks_write(self):
        repo = MagicMock()
        screen = CrudScreen(repo, GAME_FORM)
        screen.open_create()

        ok = screen.submit({"date": None, "time": "", "location": "  ", "game_type": "neutral"})

        assert ok is False
        assert screen.state == FORM_OPEN
        assert set(screen.field_errors) >= {"date", "time", "opponent_team_id", "location", "game_type"}
        assert screen.field_errors["date"] == "Date is required."
        repo.insert.assert_not_called()
        repo.update.assert_not_called()

    def test_edit_prefills_and_updates(self, make_team):
        team = make_team()
        repo = GameRepository()
        repo.insert({"date": "2025-03-15", "time": "10:00", "opponent_team_id": team["id"], "location": "Away Park", "game_type": "away"})
        screen = CrudScreen(repo, GAME_FORM)
        screen.load()

        screen.open_edit(screen.rows[0])
        assert screen.is_editing
        assert screen.values["location"] == "Away Park"
        assert screen.values["game_type"] == "away"

        assert screen.submit({**screen.values, "location": "Titans Field"}) is True
        assert screen.rows[0]["location"] == "Titans Field"
        assert len(screen.rows) == 1

    def test_cancel_does_not_write(self):
        repo = MagicMock()
        repo.list.return_value = []
        screen = CrudScreen(repo, GAME_FORM)
        screen.open_create()
        screen.cancel()

        assert screen.state == LISTING
        assert screen.values == {}
        repo.insert.assert_not_called()

    def test_backend_error_keeps_form_open(self, make_team):
        team = make_team()
        repo = MagicMock()
        repo.insert.side_effect = RuntimeError("constraint failed")
        screen = CrudScreen(repo, GAME_FORM)
        screen.open_create()

        ok = screen.submit({**screen.values, **_game_values(team["id"])})

        assert ok is False
        assert screen.state == FORM_OPEN
        assert screen.form_error == "constraint failed"
        assert screen.values["location"] == "Titans Field"
        assert screen.saving is False


class TestDelete:
    def test_declined_is_noop(self):
        repo = MagicMock()
        screen = CrudScreen(repo, GAME_FORM)

        assert screen.delete(5, confirmed=False) is False
        repo.delete.assert_not_called()

    def test_confirmed_deletes_and_refetches(self, make_team):
        team = make_team()
        repo = TeamRepository()
        screen = CrudScreen(repo, TEAM_FORM)
        screen.load()
        assert len(screen.rows) == 1

        assert screen.delete(team["id"], confirmed=True) is True
        assert screen.rows == []
        assert screen.alert is None

    def test_confirmed_removes_only_that_row(self, make_team):
        ids = [make_team(name)["id"] for name in ("Avonworth", "Baldwin", "Canon-McMillan")]
        screen = CrudScreen(TeamRepository(), TEAM_FORM)
        screen.load()

        assert screen.delete(ids[1], confirmed=True) is True

        assert sorted(r["id"] for r in screen.rows) == [ids[0], ids[2]]
        screen.load()
        assert sorted(r["id"] for r in screen.rows) == [ids[0], ids[2]]

    def test_declined_leaves_rows(self, make_team):
        ids = [make_team(name)["id"] for name in ("Avonworth", "Baldwin", "Canon-McMillan")]
        screen = CrudScreen(TeamRepository(), TEAM_FORM)
        screen.load()
        before = screen.rows

        assert screen.delete(ids[1], confirmed=False) is False
        screen.load()

        assert screen.rows == before
        assert sorted(r["id"] for r in screen.rows) == sorted(ids)

    def test_failure_sets_alert(self):
        repo = MagicMock()
        repo.delete.side_effect = RuntimeError("foreign key")
        screen = CrudScreen(repo, PLAYER_FORM)

        assert screen.delete(1, confirmed=True) is False
        assert screen.alert == "Error deleting player: foreign key"

    def test_team_delete_clears_references(self, make_team):
        team = make_team()
        games = GameRepository()
        games.insert({"date": "2025-03-15", "time": "10:00", "opponent_team_id": team["id"], "location": "X", "game_type": "home"})

        TeamRepository().delete(team["id"])

        row = games.list()[0]
        assert row["opponent_team_id"] is None
        assert row["opponent"] is None


class TestResultsForm:
    def test_negative_score_rejected(self, make_team):
        team = make_team()
        repo = MagicMock()
        screen = CrudScreen(repo, RESULT_FORM)
        screen.open_create()

        ok = screen.submit(
            {**screen.values, "game_date": "2025-03-15", "opponent_team_id": team["id"], "location": "X", "titans_score": -1}
        )

        assert ok is False
        assert screen.field_errors["titans_score"] == "Titans Score must be at least 0."
        repo.insert.assert_not_called()

    def test_opponent_name_denormalized(self, make_team):
        team = make_team("Pine-Richland")
        screen = CrudScreen(ResultRepository(), RESULT_FORM)
        screen.open_create()

        assert screen.submit(
            {**screen.values, "game_date": "2025-03-15", "opponent_team_id": team["id"], "location": "X", "titans_score": 9, "opponent_score": 4}
        )
        assert screen.rows[0]["opponent_name"] == "Pine-Richland"


class TestPlayerForm:
    def test_ranges(self):
        _, errors = PLAYER_FORM.validate({"first_name": "A", "last_name": "B", "jersey_number": 100, "grade": 8})
        assert errors["jersey_number"] == "Jersey Number must be between 0 and 99."
        assert errors["grade"] == "Grade must be between 9 and 12."

    def test_position_must_be_enum_value(self):
        _, errors = PLAYER_FORM.validate({"first_name": "A", "last_name": "B", "position": "Long Stick"})
        assert "position" in errors

    def test_active_defaults_true(self):
        clean, errors = PLAYER_FORM.validate({"first_name": "A", "last_name": "B"})
        assert errors == {}
        assert clean["is_active"] is True


class TestTeamForm:
    def test_bad_color(self):
        _, errors = TEAM_FORM.validate({"name": "X", "primary_color": "red"})
        assert errors["primary_color"] == "Primary Color must be a hex color like #1A2B3C."


class TestHomeTeamDefaults:
    def test_prefills_home_team(self, make_team):
        team = make_team("Titans")
        SettingsRepository().set(HOME_TEAM_SETTING, str(team["id"]))
        screen = CrudScreen(MagicMock(), GAME_FORM, home_team_defaults())

        screen.open_create()

        assert screen.values["home_team_id"] == team["id"]

    def test_unset_setting(self):
        screen = CrudScreen(MagicMock(), GAME_FORM, home_team_defaults())
        screen.open_create()
        assert screen.values["home_team_id"] is None

    def test_lookup_failure_is_ignored(self):
        settings = MagicMock()
        settings.home_team_id.side_effect = RuntimeError("db locked")
        screen = CrudScreen(MagicMock(), GAME_FORM, home_team_defaults(settings))

        screen.open_create()

        assert screen.state == FORM_OPEN
        assert screen.values["home_team_id"] is None


class TestTeamPicker:
    def test_sorted_by_name(self, make_team):
        make_team("Seneca Valley")
        make_team("Central Catholic")
        picker = TeamPicker()
        picker.load()

        assert [t["name"] for t in picker.teams] == ["Central Catholic", "Seneca Valley"]
        assert picker.label_for(picker.teams[0]["id"]) == "Central Catholic"
        assert picker.label_for(999) == "Unknown Team"

    def test_error(self):
        repo = MagicMock()
        repo.list_options.side_effect = RuntimeError("offline")
        picker = TeamPicker(repo)
        picker.load()

        assert picker.error == "offline"
        assert picker.teams == []
        assert picker.loading is False
