"""
Tests for roster position parsing and filtering.
"""

import pytest

from titans.models import ROSTER_FILTERS, Position, filter_roster, full_name


class TestPositionParse:
    @pytest.mark.parametrize("text", ["attack", "Attack", " ATTACK "])
    def test_exact_value(self, text):
        assert Position.parse(text) is Position.ATTACK

    def test_legacy_free_text(self):
        assert Position.parse("Long Stick Midfield") is Position.MIDFIELD

    def test_first_match_wins(self):
        assert Position.parse("Attack/Midfield") is Position.ATTACK

    @pytest.mark.parametrize("text", [None, "", "Coach"])
    def test_unknown(self, text):
        assert Position.parse(text) is None

    def test_label(self):
        assert Position.GOALIE.label == "Goalie"


class TestFilterRoster:
    PLAYERS = [
        {"first_name": "A", "position": "attack"},
        {"first_name": "B", "position": "Attack/Midfield"},
        {"first_name": "C", "position": "midfield"},
        {"first_name": "D", "position": None},
    ]

    def test_all(self):
        assert len(filter_roster(self.PLAYERS, "all")) == 4

    def test_legacy_row_listed_once(self):
        hits = [
            p["first_name"]
            for f in ROSTER_FILTERS[1:]
            for p in filter_roster(self.PLAYERS, f)
        ]
        assert hits.count("B") == 1
        assert [p["first_name"] for p in filter_roster(self.PLAYERS, "attack")] == ["A", "B"]

    def test_full_name(self):
        assert full_name({"first_name": "John", "last_name": "Smith"}) == "John Smith"
        assert full_name({"first_name": "John"}) == "John"
