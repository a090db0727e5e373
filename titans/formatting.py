from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pandas as pd

TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I %p", "%I:%M %p")


def parse_date(val: object) -> Optional[date]:
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    try:
        return date.fromisoformat(str(val).strip())
    except ValueError:
        return None


def format_game_date(val: object) -> str:
    """2025-03-15 -> 'Mar 15, 2025'."""
    d = parse_date(val)
    if d is None:
        return "" if val is None else str(val)
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def date_badge(val: object) -> dict:
    """Month / day / weekday pieces for a schedule card."""
    d = parse_date(val)
    if d is None:
        return {"month": "", "day": "", "weekday": ""}
    return {"month": d.strftime("%b"), "day": d.strftime("%d"), "weekday": d.strftime("%A")}


def format_time_ampm(val: object) -> str:
    """'13:00' -> '1:00 PM'. Unparseable values come back as given."""
    if val is None:
        return ""
    raw = str(val).strip()
    for fmt in TIME_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        hour = parsed.strftime("%I").lstrip("0") or "12"
        return f"{hour}:{parsed.strftime('%M')} {parsed.strftime('%p')}"
    return raw


def format_date_series(series: pd.Series) -> pd.Series:
    dt = pd.to_datetime(series, errors="coerce", format="%Y-%m-%d")
    return dt.dt.strftime("%b %d, %Y").fillna(series.astype(str))


def team_initials(name: Optional[str]) -> str:
    """One word -> first two letters; otherwise first letter of the first two words."""
    words = (name or "").split()
    if not words:
        return "?"
    if len(words) == 1:
        return words[0][:2].upper()
    return "".join(w[0] for w in words[:2]).upper()


def player_initials(player: dict) -> str:
    first = (player.get("first_name") or " ")[0]
    last = (player.get("last_name") or " ")[0]
    return f"{first}{last}".strip().upper() or "?"


def team_name(team: Optional[dict], fallback: str = "Unknown Team") -> str:
    if not team:
        return fallback
    return team.get("name") or fallback
