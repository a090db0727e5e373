import logging

import streamlit as st

from titans.guard import APP_TITLE, boot, get_session, go, hide_sidebar
from titans.hooks import use_games, use_results, use_roster, use_stats
from titans.routes import HOME, canonical
from titans.sections import (
    render_cta,
    render_footer,
    render_header,
    render_hero,
    render_results,
    render_roster,
    render_schedule,
    render_sponsors,
    render_stats,
)

st.set_page_config(page_title=APP_TITLE, layout="wide")

logger = logging.getLogger(__name__)


def follow_deep_link():
    """`/?route=/admin/games` style links land on the matching page."""
    target = st.query_params.get("route")
    if not target:
        return
    path = canonical(target)
    if path != HOME:
        logger.info("Deep link to %s", path)
        go(path)


def main():
    boot()
    follow_deep_link()

    if not get_session().is_signed_in:
        hide_sidebar()

    games = use_games()
    results = use_results(limit=3)
    stats = use_stats()
    roster = use_roster()

    render_header()
    render_hero(games)
    st.markdown("---")
    render_stats(stats)
    render_schedule(games)
    render_results(results)
    render_roster(roster)
    st.markdown("---")
    render_sponsors()
    render_cta()
    render_footer()


if __name__ == "__main__":
    main()
