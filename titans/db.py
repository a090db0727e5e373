import logging
import sqlite3
from pathlib import Path
from typing import Optional

from titans.config import get_optional

logger = logging.getLogger(__name__)

DB_PATH = Path(get_optional("DATABASE_PATH", str(Path("data") / "titans.db")))

# Display columns joined onto games/results for the `home` and `opponent` sides.
TEAM_DISPLAY_COLUMNS = ("id", "name", "short_name", "logo_url", "primary_color", "secondary_color")


def get_conn(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Return a SQLite connection (ensures folder exists, enforces foreign keys)."""
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def _ensure_columns(conn: sqlite3.Connection, table: str, columns: dict) -> None:
    """
    Add columns that newer code reads but an older database file lacks.
    Only ever adds nullable columns; never rewrites data.
    """
    cols = conn.execute(f"PRAGMA table_info({table});").fetchall()
    col_names = {str(c["name"]) for c in cols}
    for name, ddl in columns.items():
        if name not in col_names:
            logger.info("Adding column %s.%s", table, name)
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {ddl};")


def init_db(db_path: Optional[Path] = None) -> None:
    """Create tables if they do not exist."""
    conn = get_conn(db_path)
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS teams (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                short_name TEXT,
                logo_url TEXT,
                primary_color TEXT DEFAULT '#000000',
                secondary_color TEXT DEFAULT '#FFFFFF',
                conference TEXT,
                notes TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS games (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                date TEXT NOT NULL,
                time TEXT NOT NULL,
                opponent_team_id INTEGER REFERENCES teams(id) ON DELETE SET NULL,
                home_team_id INTEGER REFERENCES teams(id) ON DELETE SET NULL,
                location TEXT NOT NULL,
                game_type TEXT NOT NULL DEFAULT 'home' CHECK(game_type IN ('home','away')),
                notes TEXT,
                season TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_games_date ON games(date);")

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS results (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                game_date TEXT NOT NULL,
                opponent_team_id INTEGER REFERENCES teams(id) ON DELETE SET NULL,
                home_team_id INTEGER REFERENCES teams(id) ON DELETE SET NULL,
                opponent TEXT,
                titans_score INTEGER NOT NULL DEFAULT 0 CHECK(titans_score >= 0),
                opponent_score INTEGER NOT NULL DEFAULT 0 CHECK(opponent_score >= 0),
                location TEXT,
                leading_scorer TEXT,
                leading_scorer_goals INTEGER CHECK(leading_scorer_goals IS NULL OR leading_scorer_goals >= 0),
                notes TEXT,
                season TEXT,
                season_type TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_results_game_date ON results(game_date);")
        _ensure_columns(conn, "results", {"season_type": "TEXT", "opponent": "TEXT"})

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                jersey_number INTEGER CHECK(jersey_number IS NULL OR jersey_number BETWEEN 0 AND 99),
                position TEXT,
                grade INTEGER CHECK(grade IS NULL OR grade BETWEEN 9 AND 12),
                photo_url TEXT,
                bio TEXT,
                is_active INTEGER NOT NULL DEFAULT 1 CHECK(is_active IN (0,1)),
                season TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT
            );
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS admins (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1 CHECK(is_active IN (0,1)),
                created_at TEXT NOT NULL,
                last_login_at TEXT
            );
            """
        )

        conn.commit()
    finally:
        conn.close()
