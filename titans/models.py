from __future__ import annotations

from enum import Enum
from typing import Optional

PLAYER_PHOTOS_BUCKET = "player-photos"
TEAM_LOGOS_BUCKET = "team-logos"

HOME_TEAM_SETTING = "home_team_id"


class GameType(str, Enum):
    HOME = "home"
    AWAY = "away"


class Position(str, Enum):
    """Roster position tags. Stored as the enum value in players.position."""

    ATTACK = "attack"
    MIDFIELD = "midfield"
    DEFENSE = "defense"
    GOALIE = "goalie"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Position"]:
        """
        Map a stored position string to a tag.

        Exact enum values map directly. Older rows hold free text ("Long Stick
        Midfield", "Attack/Midfield"); those fall back to a case-insensitive
        substring match and take the FIRST tag that matches, so a player is
        never listed under two roster filters.
        """
        raw = (text or "").strip().lower()
        if not raw:
            return None
        for pos in cls:
            if raw == pos.value:
                return pos
        for pos in cls:
            if pos.value in raw:
                return pos
        return None


ROSTER_FILTERS = ["all"] + [p.value for p in Position]


def filter_roster(players: list[dict], position_filter: str) -> list[dict]:
    """Players whose parsed position equals the filter ('all' keeps everyone)."""
    if position_filter == "all":
        return list(players)
    wanted = Position(position_filter)
    return [p for p in players if Position.parse(p.get("position")) is wanted]


def full_name(player: dict) -> str:
    return f"{player.get('first_name') or ''} {player.get('last_name') or ''}".strip()
