"""
Table repositories for the admin screens and public hooks.

Each repository wraps one table and exposes the select / insert /
update-by-id / delete-by-id calls the site makes. Every call opens its own
connection and issues a single statement, so a failed write never leaves
partial state behind.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from titans.db import TEAM_DISPLAY_COLUMNS, get_conn
from titans.models import HOME_TEAM_SETTING
from titans.outcomes import head_to_head

logger = logging.getLogger(__name__)


def _team_join_columns(alias: str, prefix: str) -> str:
    return ", ".join(f"{alias}.{c} AS {prefix}__{c}" for c in TEAM_DISPLAY_COLUMNS)


def _nest_team_columns(row: sqlite3.Row) -> Dict[str, Any]:
    """Fold `home__name`-style columns into nested `home` / `opponent` dicts."""
    out: Dict[str, Any] = {}
    nested: Dict[str, Dict[str, Any]] = {"home": {}, "opponent": {}}
    for key in row.keys():
        if "__" in key:
            side, col = key.split("__", 1)
            nested[side][col] = row[key]
        else:
            out[key] = row[key]
    for side, team in nested.items():
        if side in out:
            # results.opponent holds the denormalized name; keep it as opponent_name
            out[f"{side}_name"] = out.pop(side)
        out[side] = team if team.get("id") is not None else None
    return out


class TableRepository:
    """Shared CRUD for one table. Subclasses set `table`, `columns`, `order_by`."""

    table: str = ""
    columns: tuple = ()
    order_by: str = "id ASC"

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path

    def _conn(self) -> sqlite3.Connection:
        return get_conn(self.db_path)

    def _clean(self, values: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {k: v for k, v in values.items() if k in self.columns}
        for k, v in cleaned.items():
            if isinstance(v, bool):
                cleaned[k] = 1 if v else 0
        if not cleaned:
            raise ValueError(f"No writable {self.table} fields supplied.")
        return cleaned

    def list(self) -> List[Dict[str, Any]]:
        conn = self._conn()
        try:
            rows = conn.execute(f"SELECT * FROM {self.table} ORDER BY {self.order_by};").fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    def get(self, row_id: int) -> Optional[Dict[str, Any]]:
        conn = self._conn()
        try:
            row = conn.execute(f"SELECT * FROM {self.table} WHERE id = ?;", (row_id,)).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        data = self._clean(values)
        cols = ", ".join(data)
        marks = ", ".join("?" for _ in data)
        conn = self._conn()
        try:
            cur = conn.execute(
                f"INSERT INTO {self.table} ({cols}) VALUES ({marks});",
                tuple(data.values()),
            )
            conn.commit()
            row = conn.execute(f"SELECT * FROM {self.table} WHERE id = ?;", (cur.lastrowid,)).fetchone()
            logger.info("Inserted %s id=%s", self.table, cur.lastrowid)
            return dict(row)
        finally:
            conn.close()

    def update(self, row_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        data = self._clean(values)
        assignments = ", ".join(f"{k} = ?" for k in data)
        conn = self._conn()
        try:
            cur = conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?;",
                (*data.values(), row_id),
            )
            conn.commit()
            if cur.rowcount == 0:
                raise RuntimeError(f"No {self.table} row with id {row_id}.")
            row = conn.execute(f"SELECT * FROM {self.table} WHERE id = ?;", (row_id,)).fetchone()
            logger.info("Updated %s id=%s", self.table, row_id)
            return dict(row)
        finally:
            conn.close()

    def delete(self, row_id: int) -> None:
        conn = self._conn()
        try:
            cur = conn.execute(f"DELETE FROM {self.table} WHERE id = ?;", (row_id,))
            conn.commit()
            if cur.rowcount == 0:
                raise RuntimeError(f"No {self.table} row with id {row_id}.")
            logger.info("Deleted %s id=%s", self.table, row_id)
        finally:
            conn.close()


class TeamRepository(TableRepository):
    table = "teams"
    columns = ("name", "short_name", "logo_url", "primary_color", "secondary_color", "conference", "notes")
    order_by = "name COLLATE NOCASE ASC, id ASC"

    def list_options(self) -> List[Dict[str, Any]]:
        """id + name of every team, for the opponent picker."""
        conn = self._conn()
        try:
            rows = conn.execute(
                "SELECT id, name FROM teams ORDER BY name COLLATE NOCASE ASC, id ASC;"
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    def record(self, team_id: int) -> Dict[str, int]:
        """Club record against one opponent: {wins, losses}."""
        conn = self._conn()
        try:
            rows = conn.execute(
                "SELECT titans_score, opponent_score FROM results WHERE opponent_team_id = ?;",
                (team_id,),
            ).fetchall()
            return head_to_head(dict(r) for r in rows)
        finally:
            conn.close()


class _JoinedTeamsRepository(TableRepository):
    """Tables whose reads carry nested `home` / `opponent` team display fields."""

    def _select_joined(self, where: str = "", params: tuple = (), order_by: str = "", limit: Optional[int] = None):
        sql = (
            f"SELECT t.*, {_team_join_columns('h', 'home')}, {_team_join_columns('o', 'opponent')} "
            f"FROM {self.table} t "
            "LEFT JOIN teams h ON h.id = t.home_team_id "
            "LEFT JOIN teams o ON o.id = t.opponent_team_id"
        )
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order_by or self.order_by}"
        if limit is not None:
            sql += " LIMIT ?"
            params = (*params, int(limit))
        conn = self._conn()
        try:
            rows = conn.execute(sql + ";", params).fetchall()
            return [_nest_team_columns(r) for r in rows]
        finally:
            conn.close()

    def list(self) -> List[Dict[str, Any]]:
        return self._select_joined()


class GameRepository(_JoinedTeamsRepository):
    table = "games"
    columns = (
        "date",
        "time",
        "opponent_team_id",
        "home_team_id",
        "location",
        "game_type",
        "notes",
        "season",
    )
    order_by = "t.date ASC, t.time ASC, t.id ASC"

    def list_upcoming(self, today: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Games dated on or after `today` (ISO date), soonest first."""
        return self._select_joined(where="t.date >= ?", params=(today,), limit=limit)


class ResultRepository(_JoinedTeamsRepository):
    table = "results"
    columns = (
        "game_date",
        "opponent_team_id",
        "home_team_id",
        "opponent",
        "titans_score",
        "opponent_score",
        "location",
        "leading_scorer",
        "leading_scorer_goals",
        "notes",
        "season",
        "season_type",
    )
    order_by = "t.game_date DESC, t.id DESC"

    def list_recent(self, limit: Optional[int] = 1) -> List[Dict[str, Any]]:
        return self._select_joined(limit=limit)

    def _with_opponent_name(self, values: Dict[str, Any]) -> Dict[str, Any]:
        # Keep the denormalized `opponent` name column in step with opponent_team_id.
        data = dict(values)
        team_id = data.get("opponent_team_id")
        if team_id in (None, ""):
            data["opponent"] = None
            return data
        team = TeamRepository(self.db_path).get(int(team_id))
        if team is None:
            raise RuntimeError(f"Opponent team {team_id} not found.")
        data["opponent"] = team["name"]
        return data

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return super().insert(self._with_opponent_name(values))

    def update(self, row_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        if "opponent_team_id" in values:
            values = self._with_opponent_name(values)
        return super().update(row_id, values)


class PlayerRepository(TableRepository):
    table = "players"
    columns = (
        "first_name",
        "last_name",
        "jersey_number",
        "position",
        "grade",
        "photo_url",
        "bio",
        "is_active",
        "season",
    )
    order_by = "last_name COLLATE NOCASE ASC, first_name COLLATE NOCASE ASC, id ASC"

    def list_active(self) -> List[Dict[str, Any]]:
        """Public roster: active players by jersey number (unnumbered last)."""
        conn = self._conn()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM players
                WHERE is_active = 1
                ORDER BY jersey_number IS NULL, jersey_number ASC, last_name COLLATE NOCASE ASC;
                """
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()


class SettingsRepository:
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        conn = get_conn(self.db_path)
        try:
            row = conn.execute("SELECT value FROM settings WHERE key = ?;", (key,)).fetchone()
            return None if row is None else row["value"]
        finally:
            conn.close()

    def set(self, key: str, value: Optional[str]) -> None:
        conn = get_conn(self.db_path)
        try:
            conn.execute(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value;
                """,
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def home_team_id(self) -> Optional[int]:
        raw = (self.get(HOME_TEAM_SETTING) or "").strip()
        return int(raw) if raw.isdigit() else None
