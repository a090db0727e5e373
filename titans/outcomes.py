"""
Single win/tie/loss rule for every place scores are compared.

Stats, the public Results section, the admin Results table and the team
head-to-head record all go through these functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

WIN = "win"
TIE = "tie"
LOSS = "loss"


def _scores(row: Mapping[str, Any]) -> tuple[int, int]:
    return int(row.get("titans_score") or 0), int(row.get("opponent_score") or 0)


def is_win(row: Mapping[str, Any]) -> bool:
    ours, theirs = _scores(row)
    return ours > theirs


def is_tie(row: Mapping[str, Any]) -> bool:
    ours, theirs = _scores(row)
    return ours == theirs


def is_loss(row: Mapping[str, Any]) -> bool:
    ours, theirs = _scores(row)
    return ours < theirs


def outcome(row: Mapping[str, Any]) -> str:
    if is_win(row):
        return WIN
    if is_tie(row):
        return TIE
    return LOSS


def outcome_label(row: Mapping[str, Any]) -> str:
    return outcome(row).capitalize()


@dataclass(frozen=True)
class SeasonStats:
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    total_goals: int = 0
    goals_against: int = 0


def compute_stats(rows: Iterable[Mapping[str, Any]]) -> SeasonStats:
    """
    Reduce result rows to season totals.

    `losses` is every non-win (ties included) so wins + losses == total_games.
    """
    rows = list(rows)
    total = len(rows)
    wins = sum(1 for r in rows if is_win(r))
    return SeasonStats(
        total_games=total,
        wins=wins,
        losses=total - wins,
        total_goals=sum(_scores(r)[0] for r in rows),
        goals_against=sum(_scores(r)[1] for r in rows),
    )


def head_to_head(rows: Iterable[Mapping[str, Any]]) -> dict:
    """{wins, losses} against one opponent, using the same split as compute_stats."""
    stats = compute_stats(rows)
    return {"wins": stats.wins, "losses": stats.losses}
