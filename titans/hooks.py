"""
Read-model hooks for the public site.

A hook owns one query plus its `data` / `loading` / `error` state and can be
re-run on demand with `refetch()`. Every fetch takes a token; only the most
recently issued fetch is allowed to write state, so an older request that
resolves late cannot overwrite newer data.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Callable, Optional

import streamlit as st

from titans.outcomes import SeasonStats, compute_stats
from titans.repositories import GameRepository, PlayerRepository, ResultRepository

logger = logging.getLogger(__name__)


class Query:
    name = "query"

    def __init__(self, initial: Any = None):
        self.data = [] if initial is None else initial
        self.loading = False
        self.error: Optional[str] = None
        self._lock = threading.Lock()
        self._issued = 0

    def _run(self) -> Any:
        raise NotImplementedError

    def _is_current(self, token: int) -> bool:
        return token == self._issued

    def fetch(self) -> None:
        with self._lock:
            self._issued += 1
            token = self._issued
            self.loading = True

        try:
            result = self._run()
        except Exception as e:
            with self._lock:
                if not self._is_current(token):
                    logger.debug("Discarding stale %s error (token %s)", self.name, token)
                    return
                logger.error("Error fetching %s: %s", self.name, e)
                self.error = str(e)
            return
        finally:
            with self._lock:
                if self._is_current(token):
                    self.loading = False

        with self._lock:
            if not self._is_current(token):
                logger.debug("Discarding stale %s response (token %s)", self.name, token)
                return
            self.data = result
            self.error = None

    def refetch(self) -> None:
        self.fetch()


class GamesQuery(Query):
    """Upcoming games (date >= today), soonest first."""

    name = "games"

    def __init__(
        self,
        repository: Optional[GameRepository] = None,
        limit: Optional[int] = None,
        today: Callable[[], date] = date.today,
    ):
        super().__init__()
        self.repository = repository or GameRepository()
        self.limit = limit
        self.today = today

    def _run(self):
        # "today" is read per fetch so a long-lived session rolls over at midnight.
        return self.repository.list_upcoming(self.today().isoformat(), limit=self.limit) or []


class ResultsQuery(Query):
    """Most recent results, newest first. Default limit of 1 = "latest result"."""

    name = "results"

    def __init__(self, repository: Optional[ResultRepository] = None, limit: Optional[int] = 1):
        super().__init__()
        self.repository = repository or ResultRepository()
        self.limit = limit

    def _run(self):
        return self.repository.list_recent(limit=self.limit) or []


class StatsQuery(Query):
    name = "stats"

    def __init__(self, repository: Optional[ResultRepository] = None):
        super().__init__(initial=SeasonStats())
        self.repository = repository or ResultRepository()

    def _run(self):
        return compute_stats(self.repository.list() or [])


class RosterQuery(Query):
    """Active players for the public roster."""

    name = "roster"

    def __init__(self, repository: Optional[PlayerRepository] = None):
        super().__init__()
        self.repository = repository or PlayerRepository()

    def _run(self):
        return self.repository.list_active() or []


def _use(key: str, bound: Any, factory: Callable[[], Query]) -> Query:
    """
    Keep one hook per key in session state. Every page run is a mount and
    refetches, so admin edits show up on the next visit; a failed refetch
    keeps the last good data. A changed bound starts a fresh hook.
    """
    slot = st.session_state.get(key)
    if slot is None or slot["bound"] != bound:
        query = factory()
        st.session_state[key] = {"bound": bound, "query": query}
    else:
        query = slot["query"]
    query.fetch()
    return query


def use_games(limit: Optional[int] = None) -> GamesQuery:
    return _use("hook_games", limit, lambda: GamesQuery(limit=limit))


def use_results(limit: int = 1) -> ResultsQuery:
    return _use("hook_results", limit, lambda: ResultsQuery(limit=limit))


def use_stats() -> StatsQuery:
    return _use("hook_stats", None, StatsQuery)


def use_roster() -> RosterQuery:
    return _use("hook_roster", None, RosterQuery)
