"""
Shared fixtures: every test gets its own SQLite file.
"""

import pytest

from titans import db
from titans.repositories import TeamRepository


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    """Point the app at a fresh database under tmp_path."""
    path = tmp_path / "titans.db"
    monkeypatch.setattr(db, "DB_PATH", path)
    db.init_db()
    return path


@pytest.fixture
def make_team():
    """Insert a team and return its row."""

    def _make(name="North Allegheny Tigers", **extra):
        return TeamRepository().insert({"name": name, **extra})

    return _make
