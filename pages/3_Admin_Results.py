import pandas as pd
import streamlit as st

from titans.admin_ui import (
    get_screen,
    get_team_picker,
    render_form,
    render_row_actions,
    render_screen_header,
    render_table,
    show_flash,
)
from titans.crud import RESULT_FORM, CrudScreen, home_team_defaults
from titans.formatting import format_date_series, format_game_date, team_name
from titans.guard import APP_TITLE, render_admin_header, require_admin
from titans.outcomes import outcome_label
from titans.repositories import ResultRepository

st.set_page_config(page_title=f"{APP_TITLE} - Results", layout="wide")

session = require_admin()
render_admin_header(session)
show_flash()


def _opponent(r) -> str:
    return team_name(r.get("opponent"), r.get("opponent_name") or "Unknown Team")


def results_table(rows):
    df = pd.DataFrame(
        [
            {
                "Date": r.get("game_date"),
                "Opponent": _opponent(r),
                "Score": f"{r['titans_score']} - {r['opponent_score']}",
                "Result": outcome_label(r),
                "Leading Scorer": r.get("leading_scorer") or "",
                "Type": r.get("season_type") or "",
            }
            for r in rows
        ]
    )
    df["Date"] = format_date_series(df["Date"])
    return df


screen = get_screen("results_screen", lambda: CrudScreen(ResultRepository(), RESULT_FORM, home_team_defaults()))

render_screen_header(screen, "Manage Results", "Record final scores for completed games.")
render_form(screen, picker=get_team_picker())

try:
    render_table(screen, results_table, "No results yet. Add your first game result to get started.")
    render_row_actions(
        screen,
        lambda r: f"{format_game_date(r.get('game_date'))} vs {_opponent(r)} ({r['titans_score']}-{r['opponent_score']})",
        delete_warning="Are you sure you want to delete this result?",
    )
except Exception as e:
    st.error(str(e))
