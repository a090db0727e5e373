"""
Admin CRUD screens: a list of rows plus a create/edit form for one table.

    listing --open_create/open_edit--> form_open --submit ok / cancel--> listing

Forms are validated against a FormSpec before anything is written; the
backend's own constraint errors are shown verbatim in the open form.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from titans.config import current_season
from titans.models import GameType, Position
from titans.repositories import SettingsRepository, TableRepository, TeamRepository

logger = logging.getLogger(__name__)

LISTING = "listing"
FORM_OPEN = "form_open"

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass
class FieldSpec:
    name: str
    label: str
    kind: str = "text"  # text | textarea | int | date | time | choice | team | bool | color | image
    required: bool = False
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    choices: Tuple[str, ...] = ()
    default: Any = None
    placeholder: str = ""


def _blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def _clean_field(spec: FieldSpec, raw: Any) -> Any:
    """Coerce one raw form value. Raises ValueError with a user-facing message."""
    if isinstance(raw, Enum):
        raw = raw.value

    if spec.kind == "bool":
        return bool(raw)

    if _blank(raw):
        if spec.required:
            raise ValueError(f"{spec.label} is required.")
        return None

    if spec.kind in ("int", "team"):
        if isinstance(raw, bool):
            raise ValueError(f"{spec.label} must be a whole number.")
        try:
            num = int(str(raw).strip()) if not isinstance(raw, int) else raw
        except ValueError:
            raise ValueError(f"{spec.label} must be a whole number.") from None
        if spec.min_value is not None and spec.max_value is not None:
            if not spec.min_value <= num <= spec.max_value:
                raise ValueError(f"{spec.label} must be between {spec.min_value} and {spec.max_value}.")
        elif spec.min_value is not None and num < spec.min_value:
            raise ValueError(f"{spec.label} must be at least {spec.min_value}.")
        return num

    if spec.kind == "date":
        if isinstance(raw, datetime):
            return raw.date().isoformat()
        if isinstance(raw, date):
            return raw.isoformat()
        try:
            return date.fromisoformat(str(raw).strip()).isoformat()
        except ValueError:
            raise ValueError(f"{spec.label} must be a date (YYYY-MM-DD).") from None

    if spec.kind == "time":
        if isinstance(raw, time):
            return raw.strftime("%H:%M")
        s = str(raw).strip()
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(s, fmt).strftime("%H:%M")
            except ValueError:
                continue
        raise ValueError(f"{spec.label} must be a time (HH:MM).")

    if spec.kind == "choice":
        s = str(raw).strip()
        if s not in spec.choices:
            raise ValueError(f"{spec.label} must be one of: {', '.join(spec.choices)}.")
        return s

    s = str(raw).strip()
    if spec.kind == "color" and not HEX_COLOR_RE.match(s):
        raise ValueError(f"{spec.label} must be a hex color like #1A2B3C.")
    return s


@dataclass
class FormSpec:
    entity: str
    fields: List[FieldSpec] = field(default_factory=list)

    def defaults(self) -> Dict[str, Any]:
        out = {}
        for f in self.fields:
            out[f.name] = f.default() if callable(f.default) else f.default
        return out

    def from_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        values = self.defaults()
        for f in self.fields:
            if row.get(f.name) is not None:
                values[f.name] = bool(row[f.name]) if f.kind == "bool" else row[f.name]
        return values

    def validate(self, values: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
        clean: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        defaults = self.defaults()
        for f in self.fields:
            try:
                clean[f.name] = _clean_field(f, values.get(f.name, defaults[f.name]))
            except ValueError as e:
                errors[f.name] = str(e)
        return clean, errors


class CrudScreen:
    def __init__(
        self,
        repository: TableRepository,
        form: FormSpec,
        defaults_provider: Optional[Callable[[], Dict[str, Any]]] = None,
    ):
        self.repository = repository
        self.form = form
        self.defaults_provider = defaults_provider

        self.rows: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.loaded = False

        self.state = LISTING
        self.editing: Optional[Dict[str, Any]] = None
        self.values: Dict[str, Any] = {}
        self.field_errors: Dict[str, str] = {}
        self.form_error: Optional[str] = None
        self.saving = False

        self.alert: Optional[str] = None

    # listing
    def load(self) -> None:
        self.loading = True
        try:
            self.rows = self.repository.list() or []
            self.error = None
        except Exception as e:
            logger.error("Error fetching %s list: %s", self.form.entity, e)
            self.error = str(e)
        finally:
            self.loading = False
            self.loaded = True

    def refetch(self) -> None:
        self.load()

    # form
    def _open(self, editing: Optional[Dict[str, Any]], values: Dict[str, Any]) -> None:
        self.editing = editing
        self.values = values
        self.field_errors = {}
        self.form_error = None
        self.state = FORM_OPEN

    def open_create(self) -> None:
        values = self.form.defaults()
        if self.defaults_provider is not None:
            try:
                values.update(self.defaults_provider() or {})
            except Exception as e:
                logger.warning("Could not load %s form defaults: %s", self.form.entity, e)
        self._open(None, values)

    def open_edit(self, row: Dict[str, Any]) -> None:
        self._open(row, self.form.from_row(row))

    def cancel(self) -> None:
        self.state = LISTING
        self.editing = None
        self.values = {}
        self.field_errors = {}
        self.form_error = None

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    def submit(self, values: Dict[str, Any]) -> bool:
        """Validate then insert/update. True when the row was saved and the form closed."""
        self.values = dict(values)
        self.form_error = None
        clean, errors = self.form.validate(values)
        self.field_errors = errors
        if errors:
            return False

        self.saving = True
        try:
            if self.editing is not None:
                self.repository.update(self.editing["id"], clean)
            else:
                self.repository.insert(clean)
        except Exception as e:
            logger.error("Error saving %s: %s", self.form.entity, e)
            self.form_error = str(e)
            return False
        finally:
            self.saving = False

        self.cancel()
        self.refetch()
        return True

    # delete
    def delete(self, row_id: int, confirmed: bool) -> bool:
        """Irreversible. Without explicit confirmation nothing happens."""
        self.alert = None
        if not confirmed:
            return False
        try:
            self.repository.delete(row_id)
        except Exception as e:
            logger.error("Error deleting %s %s: %s", self.form.entity, row_id, e)
            self.alert = f"Error deleting {self.form.entity}: {e}"
            return False
        self.refetch()
        return True


class TeamPicker:
    """Opponent selector. Loads its own team list, separate from the parent screen."""

    def __init__(self, repository: Optional[TeamRepository] = None):
        self.repository = repository or TeamRepository()
        self.teams: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None

    def load(self) -> None:
        self.loading = True
        try:
            self.teams = self.repository.list_options() or []
            self.error = None
        except Exception as e:
            logger.error("Error fetching teams: %s", e)
            self.error = str(e)
        finally:
            self.loading = False

    def label_for(self, team_id: Any) -> str:
        for t in self.teams:
            if t["id"] == team_id:
                return t["name"]
        return "Unknown Team"


def home_team_defaults(settings: Optional[SettingsRepository] = None) -> Callable[[], Dict[str, Any]]:
    """Defaults provider: the club's own team id from Settings, when set."""
    settings = settings or SettingsRepository()

    def _provider() -> Dict[str, Any]:
        team_id = settings.home_team_id()
        return {"home_team_id": team_id} if team_id is not None else {}

    return _provider


GAME_FORM = FormSpec(
    entity="game",
    fields=[
        FieldSpec("date", "Date", kind="date", required=True),
        FieldSpec("time", "Time", kind="time", required=True),
        FieldSpec("opponent_team_id", "Opponent Team", kind="team", required=True),
        FieldSpec("home_team_id", "Home Team", kind="team"),
        FieldSpec("location", "Location", required=True, placeholder="Titans Field"),
        FieldSpec(
            "game_type",
            "Game Type",
            kind="choice",
            required=True,
            choices=tuple(t.value for t in GameType),
            default=GameType.HOME.value,
        ),
        FieldSpec("notes", "Notes", kind="textarea", placeholder="Season opener, youth day, etc."),
        FieldSpec("season", "Season", default=current_season),
    ],
)

RESULT_FORM = FormSpec(
    entity="result",
    fields=[
        FieldSpec("game_date", "Game Date", kind="date", required=True),
        FieldSpec("opponent_team_id", "Opponent Team", kind="team", required=True),
        FieldSpec("home_team_id", "Home Team", kind="team"),
        FieldSpec("titans_score", "Titans Score", kind="int", required=True, min_value=0, default=0),
        FieldSpec("opponent_score", "Opponent Score", kind="int", required=True, min_value=0, default=0),
        FieldSpec("location", "Location", required=True, placeholder="Titans Field"),
        FieldSpec("leading_scorer", "Leading Scorer"),
        FieldSpec("leading_scorer_goals", "Leading Scorer Goals", kind="int", min_value=0),
        FieldSpec("season_type", "Season Type", placeholder="Regular Season"),
        FieldSpec("notes", "Notes", kind="textarea"),
        FieldSpec("season", "Season", default=current_season),
    ],
)

TEAM_FORM = FormSpec(
    entity="team",
    fields=[
        FieldSpec("name", "Team Name", required=True, placeholder="North Allegheny Tigers"),
        FieldSpec("short_name", "Short Name", placeholder="NA"),
        FieldSpec("logo_url", "Team Logo", kind="image"),
        FieldSpec("primary_color", "Primary Color", kind="color", default="#000000"),
        FieldSpec("secondary_color", "Secondary Color", kind="color", default="#FFFFFF"),
        FieldSpec("conference", "Conference"),
        FieldSpec("notes", "Notes", kind="textarea"),
    ],
)

PLAYER_FORM = FormSpec(
    entity="player",
    fields=[
        FieldSpec("first_name", "First Name", required=True, placeholder="John"),
        FieldSpec("last_name", "Last Name", required=True, placeholder="Smith"),
        FieldSpec("jersey_number", "Jersey Number", kind="int", min_value=0, max_value=99),
        FieldSpec("position", "Position", kind="choice", choices=tuple(p.value for p in Position)),
        FieldSpec("grade", "Grade", kind="int", min_value=9, max_value=12),
        FieldSpec("photo_url", "Player Photo", kind="image"),
        FieldSpec("bio", "Bio", kind="textarea"),
        FieldSpec("season", "Season", default=current_season),
        FieldSpec("is_active", "Active (show on public roster)", kind="bool", default=True),
    ],
)
